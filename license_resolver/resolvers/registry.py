"""Resolver families consulted by the resolution chain."""

from collections.abc import Iterable
from typing import Optional

import httpx

from license_resolver.resolvers.base import (
    UriLicenseResolver,
    VersionInfoLicenseResolver,
)
from license_resolver.resolvers.github import GitHubLicenseResolver
from license_resolver.resolvers.netframework import NetFrameworkLicenseResolver
from license_resolver.resolvers.opensource_org import OpenSourceOrgLicenseResolver


class ResolverRegistry:
    """Ordered resolver lists, one per capability family.

    Order within a family is priority order: the first resolver that
    accepts a subject and returns text wins.
    """

    def __init__(
        self,
        license_url: Optional[Iterable[UriLicenseResolver]] = None,
        project_url: Optional[Iterable[UriLicenseResolver]] = None,
        repository_url: Optional[Iterable[UriLicenseResolver]] = None,
        version_info: Optional[Iterable[VersionInfoLicenseResolver]] = None,
    ) -> None:
        self.license_url: tuple[UriLicenseResolver, ...] = tuple(license_url or ())
        self.project_url: tuple[UriLicenseResolver, ...] = tuple(project_url or ())
        self.repository_url: tuple[UriLicenseResolver, ...] = tuple(
            repository_url or ()
        )
        self.version_info: tuple[VersionInfoLicenseResolver, ...] = tuple(
            version_info or ()
        )


def default_registry(client: Optional[httpx.AsyncClient] = None) -> ResolverRegistry:
    """Build the registry with the built-in resolvers.

    Args:
        client: Optional shared httpx.AsyncClient handed to remote resolvers.

    Returns:
        ResolverRegistry wired with the .NET Library, opensource.org and
        GitHub resolvers.
    """
    net_framework = NetFrameworkLicenseResolver()
    github = GitHubLicenseResolver(client=client)
    return ResolverRegistry(
        license_url=[
            net_framework,
            OpenSourceOrgLicenseResolver(client=client),
            github,
        ],
        project_url=[github],
        repository_url=[github],
        version_info=[net_framework],
    )
