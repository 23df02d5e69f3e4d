"""Tests for the .NET Library license resolver."""
import asyncio

import httpx
import pytest

from license_resolver.models.config import ResolverOptions
from license_resolver.models.dependency import VersionInfo
from license_resolver.resolvers.netframework import (
    NET_FRAMEWORK_PRODUCT_NAME,
    NetFrameworkLicenseResolver,
    load_bundled_license,
)


class TestLoadBundledLicense:
    """Tests for load_bundled_license()."""

    def test_returns_license_terms(self) -> None:
        """Test the bundled license text is available."""
        text = load_bundled_license()

        assert text is not None
        assert "MICROSOFT .NET LIBRARY" in text

    def test_loaded_once(self) -> None:
        """Test repeated loads return the same object."""
        assert load_bundled_license() is load_bundled_license()

    @pytest.mark.asyncio
    async def test_concurrent_first_use(self) -> None:
        """Test concurrent callers all get the same text."""
        results = await asyncio.gather(
            *(asyncio.to_thread(load_bundled_license) for _ in range(8))
        )
        assert len({id(text) for text in results}) == 1


class TestNetFrameworkLicenseResolver:
    """Tests for NetFrameworkLicenseResolver."""

    @pytest.mark.asyncio
    async def test_recognizes_fwlink(self, options: ResolverOptions) -> None:
        """Test the .NET Library fwlink is recognized."""
        resolver = NetFrameworkLicenseResolver()
        url = httpx.URL("https://go.microsoft.com/fwlink/?LinkId=529443")

        assert await resolver.can_resolve_url(url, options)
        assert await resolver.resolve_url(url, options) == load_bundled_license()

    @pytest.mark.asyncio
    async def test_ignores_other_links(self, options: ResolverOptions) -> None:
        """Test other fwlinks are not claimed."""
        resolver = NetFrameworkLicenseResolver()
        url = httpx.URL("https://go.microsoft.com/fwlink/?LinkId=329770")

        assert not await resolver.can_resolve_url(url, options)

    @pytest.mark.asyncio
    async def test_recognizes_framework_binaries(self, options: ResolverOptions) -> None:
        """Test binaries with the .NET Framework product name are claimed."""
        resolver = NetFrameworkLicenseResolver()
        info = VersionInfo(
            file_name="System.Web.dll", product_name=NET_FRAMEWORK_PRODUCT_NAME
        )

        assert await resolver.can_resolve_version_info(info, options)
        assert await resolver.resolve_version_info(info, options) == load_bundled_license()

    @pytest.mark.asyncio
    async def test_product_name_must_match_exactly(
        self, options: ResolverOptions
    ) -> None:
        """Test a product name without the registered sign is not claimed."""
        resolver = NetFrameworkLicenseResolver()
        info = VersionInfo(file_name="x.dll", product_name="Microsoft .NET Framework")

        assert not await resolver.can_resolve_version_info(info, options)
