"""Resolver returning the bundled Microsoft .NET Library license."""

import threading
from importlib import resources
from typing import Optional

import httpx

from license_resolver.models.config import ResolverOptions
from license_resolver.models.dependency import VersionInfo
from license_resolver.resolvers.base import (
    UriLicenseResolver,
    VersionInfoLicenseResolver,
)

LICENSE_RESOURCE = "dotnet_library_license.txt"

# go.microsoft.com/fwlink/?LinkId=529443 redirects to the .NET Library terms
NET_LIBRARY_LINK_ID = "LinkId=529443"
NET_FRAMEWORK_PRODUCT_NAME = "Microsoft\u00ae .NET Framework"

_license_lock = threading.Lock()
_license_content: Optional[str] = None


def load_bundled_license() -> Optional[str]:
    """Read the bundled license text once per process.

    Returns:
        The license text, or None if the resource is missing.
    """
    global _license_content
    if _license_content is not None:
        return _license_content
    with _license_lock:
        if _license_content is None:
            resource = resources.files("license_resolver") / "data" / LICENSE_RESOURCE
            try:
                _license_content = resource.read_text(encoding="utf-8")
            except FileNotFoundError:
                return None
    return _license_content


class NetFrameworkLicenseResolver(UriLicenseResolver, VersionInfoLicenseResolver):
    """Recognizes the .NET Library license link and .NET Framework binaries."""

    async def can_resolve_url(self, url: httpx.URL, options: ResolverOptions) -> bool:
        return NET_LIBRARY_LINK_ID in str(url)

    async def resolve_url(
        self, url: httpx.URL, options: ResolverOptions
    ) -> Optional[str]:
        return load_bundled_license()

    async def can_resolve_version_info(
        self, version_info: VersionInfo, options: ResolverOptions
    ) -> bool:
        return version_info.product_name == NET_FRAMEWORK_PRODUCT_NAME

    async def resolve_version_info(
        self, version_info: VersionInfo, options: ResolverOptions
    ) -> Optional[str]:
        return load_bundled_license()
