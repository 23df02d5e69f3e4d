"""Pydantic data models for license-resolver."""

from license_resolver.models.config import ResolverConfig, ResolverOptions
from license_resolver.models.dependency import (
    DependencyRecord,
    PackageMetadata,
    VersionInfo,
)
from license_resolver.models.resolution import (
    LicenseResolution,
    ResolutionSource,
    ResolutionStatus,
)
from license_resolver.models.scan import (
    ResolvedDependency,
    ScanOptions,
    ScanResult,
    Verbosity,
)

__all__ = [
    "DependencyRecord",
    "LicenseResolution",
    "PackageMetadata",
    "ResolutionSource",
    "ResolutionStatus",
    "ResolvedDependency",
    "ResolverConfig",
    "ResolverOptions",
    "ScanOptions",
    "ScanResult",
    "Verbosity",
]
