"""opensource.org license resolver backed by the GitHub licenses API."""

from typing import Optional

import httpx

from license_resolver.constants import GITHUB_API_BASE_URL
from license_resolver.exceptions import NetworkError
from license_resolver.models.config import ResolverOptions
from license_resolver.resolvers.base import UriLicenseResolver
from license_resolver.resolvers.github import github_api_headers

OPENSOURCE_ORG_HOST = "opensource.org"

# Old opensource.org pages look like /licenses/mit-license.php
PAGE_EXTENSIONS = (".php", ".html", ".htm")
LEGACY_SUFFIX = "-license"


def extract_license_id(url: httpx.URL) -> Optional[str]:
    """Extract the license key from an opensource.org license URL.

    Args:
        url: URL on opensource.org, e.g. https://opensource.org/licenses/MIT.

    Returns:
        Lower-case license key as used by the GitHub licenses API,
        or None if the path is not a license page.
    """
    segments = [s for s in url.path.split("/") if s]
    if len(segments) < 2 or segments[0] != "licenses":
        return None

    license_id = segments[1].lower()
    for extension in PAGE_EXTENSIONS:
        if license_id.endswith(extension):
            license_id = license_id[: -len(extension)]
            break
    if license_id.endswith(LEGACY_SUFFIX):
        license_id = license_id[: -len(LEGACY_SUFFIX)]
    return license_id or None


class OpenSourceOrgLicenseResolver(UriLicenseResolver):
    """Resolver for https://opensource.org/licenses/<id> URLs.

    opensource.org serves HTML pages only, so the license id is looked up
    in the GitHub licenses API which returns the license template as the
    ``body`` field of a JSON document.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        api_base_url: str = GITHUB_API_BASE_URL,
    ) -> None:
        """Initialize with an optional HTTP client.

        Args:
            client: Optional shared httpx.AsyncClient for connection reuse.
            api_base_url: GitHub REST API base address.
        """
        self._client = client
        self._api_base_url = api_base_url.rstrip("/")

    async def can_resolve_url(self, url: httpx.URL, options: ResolverOptions) -> bool:
        return url.host.lower() == OPENSOURCE_ORG_HOST

    async def resolve_url(
        self, url: httpx.URL, options: ResolverOptions
    ) -> Optional[str]:
        """Fetch the license body for an opensource.org URL.

        Args:
            url: opensource.org license URL.
            options: Run options carrying timeout, user agent and token.

        Returns:
            License text, or None for unknown ids, non-2xx responses and
            malformed JSON.

        Raises:
            NetworkError: If the request fails in transport.
        """
        license_id = extract_license_id(url)
        if license_id is None:
            return None

        api_url = f"{self._api_base_url}/licenses/{license_id}"

        async def do_fetch(client: httpx.AsyncClient) -> Optional[str]:
            try:
                response = await client.get(
                    api_url,
                    headers=github_api_headers(options),
                    timeout=httpx.Timeout(options.timeout),
                )
            except httpx.RequestError as e:
                raise NetworkError(f"Failed to fetch {api_url}: {e}") from e

            if not response.is_success:
                return None
            try:
                payload = response.json()
            except ValueError:
                return None
            if not isinstance(payload, dict):
                return None
            body = payload.get("body")
            return body if isinstance(body, str) else None

        if self._client:
            return await do_fetch(self._client)

        async with httpx.AsyncClient() as new_client:
            return await do_fetch(new_client)
