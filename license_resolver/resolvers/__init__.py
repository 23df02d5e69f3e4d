"""License capability resolvers package."""

from license_resolver.resolvers.base import (
    UriLicenseResolver,
    VersionInfoLicenseResolver,
)
from license_resolver.resolvers.github import GitHubLicenseResolver
from license_resolver.resolvers.netframework import NetFrameworkLicenseResolver
from license_resolver.resolvers.opensource_org import OpenSourceOrgLicenseResolver
from license_resolver.resolvers.registry import ResolverRegistry, default_registry

__all__ = [
    "GitHubLicenseResolver",
    "NetFrameworkLicenseResolver",
    "OpenSourceOrgLicenseResolver",
    "ResolverRegistry",
    "UriLicenseResolver",
    "VersionInfoLicenseResolver",
    "default_registry",
]
