"""Custom exceptions for license-resolver."""


class LicenseResolverError(Exception):
    """Base exception for all license-resolver errors."""

    pass


class NetworkError(LicenseResolverError):
    """Exception raised when a network request fails."""

    pass


class ConfigurationError(LicenseResolverError):
    """Exception raised when configuration is invalid."""

    pass


class ResolutionError(LicenseResolverError):
    """Exception raised when a batch resolution fails as a whole."""

    pass


class ResolutionCancelled(LicenseResolverError):
    """Exception raised when a cancellation signal is observed between steps.

    Step boundaries never convert this into "not found"; it always
    propagates to the caller of the resolution.
    """

    pass
