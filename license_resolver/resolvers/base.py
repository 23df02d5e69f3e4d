"""Capability resolver interfaces.

A capability resolver recognizes one kind of subject (a URL or the version
metadata of a binary) and produces license text for it. One class may
implement several contracts; which resolution step consults it is decided
by the resolver family it is registered in (see registry.py).
"""

from abc import ABC, abstractmethod
from typing import Optional

import httpx

from license_resolver.models.config import ResolverOptions
from license_resolver.models.dependency import VersionInfo


class UriLicenseResolver(ABC):
    """Resolver for license, project or repository URLs."""

    @abstractmethod
    async def can_resolve_url(self, url: httpx.URL, options: ResolverOptions) -> bool:
        """Check whether this resolver understands the URL.

        Args:
            url: Absolute URL taken from package metadata or a redirect target.
            options: Run options.

        Returns:
            True if resolve_url() should be attempted.
        """

    @abstractmethod
    async def resolve_url(
        self, url: httpx.URL, options: ResolverOptions
    ) -> Optional[str]:
        """Produce raw license text for the URL.

        Args:
            url: URL accepted by can_resolve_url().
            options: Run options.

        Returns:
            License text, or None if nothing could be found.

        Raises:
            NetworkError: If the transport fails.
        """


class VersionInfoLicenseResolver(ABC):
    """Resolver for the version metadata of a compiled binary."""

    @abstractmethod
    async def can_resolve_version_info(
        self, version_info: VersionInfo, options: ResolverOptions
    ) -> bool:
        """Check whether this resolver recognizes the binary."""

    @abstractmethod
    async def resolve_version_info(
        self, version_info: VersionInfo, options: ResolverOptions
    ) -> Optional[str]:
        """Produce raw license text for the binary, or None."""
