"""Tests for the opensource.org license resolver."""
import httpx
import pytest

from license_resolver.exceptions import NetworkError
from license_resolver.models.config import ResolverOptions
from license_resolver.resolvers.opensource_org import (
    OpenSourceOrgLicenseResolver,
    extract_license_id,
)


class TestExtractLicenseId:
    """Tests for extract_license_id()."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://opensource.org/licenses/MIT", "mit"),
            ("https://opensource.org/licenses/Apache-2.0", "apache-2.0"),
            ("https://opensource.org/licenses/mit-license.php", "mit"),
            ("https://opensource.org/licenses/BSD-3-Clause.html", "bsd-3-clause"),
            ("https://opensource.org/licenses/MIT/", "mit"),
        ],
    )
    def test_license_pages(self, url: str, expected: str) -> None:
        """Test license ids are extracted and lower-cased."""
        assert extract_license_id(httpx.URL(url)) == expected

    @pytest.mark.parametrize(
        "url",
        ["https://opensource.org/", "https://opensource.org/licenses", "https://opensource.org/about/MIT"],
    )
    def test_other_pages(self, url: str) -> None:
        """Test pages that are not license pages give None."""
        assert extract_license_id(httpx.URL(url)) is None


class TestOpenSourceOrgLicenseResolver:
    """Tests for OpenSourceOrgLicenseResolver."""

    @pytest.mark.asyncio
    async def test_can_resolve(self, options: ResolverOptions) -> None:
        """Test only opensource.org URLs are accepted."""
        resolver = OpenSourceOrgLicenseResolver()

        assert await resolver.can_resolve_url(
            httpx.URL("https://opensource.org/licenses/MIT"), options
        )
        assert not await resolver.can_resolve_url(
            httpx.URL("https://choosealicense.com/licenses/mit/"), options
        )

    @pytest.mark.asyncio
    async def test_resolves_body(self, options: ResolverOptions) -> None:
        """Test the license body from the licenses API is returned."""
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, json={"key": "mit", "body": "MIT License\n"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await OpenSourceOrgLicenseResolver(client=client).resolve_url(
                httpx.URL("https://opensource.org/licenses/MIT"), options
            )

        assert result == "MIT License\n"
        assert requested == ["https://api.github.com/licenses/mit"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(404, json={"message": "Not Found"}),
            httpx.Response(200, text="not json"),
            httpx.Response(200, json=["unexpected"]),
            httpx.Response(200, json={"key": "mit"}),
        ],
    )
    async def test_unusable_answers(
        self, options: ResolverOptions, response: httpx.Response
    ) -> None:
        """Test error statuses and malformed documents give None."""
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: response)
        ) as client:
            result = await OpenSourceOrgLicenseResolver(client=client).resolve_url(
                httpx.URL("https://opensource.org/licenses/MIT"), options
            )

        assert result is None

    @pytest.mark.asyncio
    async def test_non_license_page_makes_no_request(
        self, options: ResolverOptions
    ) -> None:
        """Test URLs without a license id are not looked up."""
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, json={"body": "x"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await OpenSourceOrgLicenseResolver(client=client).resolve_url(
                httpx.URL("https://opensource.org/about"), options
            )

        assert result is None
        assert requested == []

    @pytest.mark.asyncio
    async def test_transport_error(self, options: ResolverOptions) -> None:
        """Test a transport failure surfaces as NetworkError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(NetworkError):
                await OpenSourceOrgLicenseResolver(client=client).resolve_url(
                    httpx.URL("https://opensource.org/licenses/MIT"), options
                )
