"""Tests for resolver registries."""
import httpx

from license_resolver.resolvers.github import GitHubLicenseResolver
from license_resolver.resolvers.netframework import NetFrameworkLicenseResolver
from license_resolver.resolvers.opensource_org import OpenSourceOrgLicenseResolver
from license_resolver.resolvers.registry import ResolverRegistry, default_registry


class TestResolverRegistry:
    """Tests for ResolverRegistry."""

    def test_empty_by_default(self) -> None:
        """Test every family starts empty."""
        registry = ResolverRegistry()

        assert registry.license_url == ()
        assert registry.project_url == ()
        assert registry.repository_url == ()
        assert registry.version_info == ()

    def test_families_keep_order(self) -> None:
        """Test resolvers are stored in the given priority order."""
        first = NetFrameworkLicenseResolver()
        second = GitHubLicenseResolver()

        registry = ResolverRegistry(license_url=iter([first, second]))

        assert registry.license_url == (first, second)


class TestDefaultRegistry:
    """Tests for default_registry()."""

    def test_license_url_priority(self) -> None:
        """Test .NET Library, opensource.org and GitHub are tried in order."""
        registry = default_registry()

        assert [type(r) for r in registry.license_url] == [
            NetFrameworkLicenseResolver,
            OpenSourceOrgLicenseResolver,
            GitHubLicenseResolver,
        ]

    def test_repository_and_project_use_github(self) -> None:
        """Test repository and project URLs go to GitHub only."""
        registry = default_registry()

        assert [type(r) for r in registry.repository_url] == [GitHubLicenseResolver]
        assert [type(r) for r in registry.project_url] == [GitHubLicenseResolver]

    def test_version_info_uses_net_framework(self) -> None:
        """Test binary metadata goes to the .NET Framework resolver."""
        registry = default_registry()

        assert [type(r) for r in registry.version_info] == [NetFrameworkLicenseResolver]

    def test_client_is_shared(self) -> None:
        """Test remote resolvers receive the given client."""
        client = httpx.AsyncClient()
        registry = default_registry(client)

        github = registry.repository_url[0]
        assert isinstance(github, GitHubLicenseResolver)
        assert github._client is client
