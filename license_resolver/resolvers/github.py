"""GitHub repository license resolver."""
import base64
import binascii
from typing import Any, NamedTuple, Optional

import httpx

from license_resolver.constants import GITHUB_API_BASE_URL, GITHUB_RAW_BASE_URL
from license_resolver.exceptions import NetworkError
from license_resolver.models.config import ResolverOptions
from license_resolver.resolvers.base import UriLicenseResolver

GITHUB_HOSTS = ("github.com", "www.github.com")

# Common LICENSE file names to try
LICENSE_FILES = ["LICENSE", "LICENSE.txt", "LICENSE.md", "LICENCE", "COPYING"]

# Common branch names to try
BRANCHES = ["main", "master", "HEAD"]

# First path segments on github.com that are not repository owners
RESERVED_OWNERS = {"orgs", "sponsors", "topics", "features", "about", "login"}


class GitHubLocation(NamedTuple):
    """Repository and optional file a github.com URL points at."""

    owner: str
    repo: str
    ref: Optional[str] = None
    path: Optional[str] = None


def github_api_headers(options: ResolverOptions) -> dict[str, str]:
    """Build headers for GitHub REST API requests.

    GitHub rejects API requests without a User-Agent. The bearer token is
    only sent when one is configured.

    Args:
        options: Run options carrying the user agent and token.

    Returns:
        Header mapping.
    """
    headers = {
        "User-Agent": options.user_agent,
        "Accept": "application/vnd.github+json",
    }
    if options.github_token:
        headers["Authorization"] = f"Bearer {options.github_token}"
    return headers


def parse_github_url(url: httpx.URL) -> Optional[GitHubLocation]:
    """Extract owner, repository and file from a github.com URL.

    Args:
        url: Absolute URL.

    Returns:
        GitHubLocation, or None if the URL is not a repository URL.
    """
    if url.host.lower() not in GITHUB_HOSTS:
        return None

    segments = [s for s in url.path.split("/") if s]
    if len(segments) < 2 or segments[0].lower() in RESERVED_OWNERS:
        return None

    owner, repo = segments[0], segments[1]
    if repo.endswith(".git"):
        repo = repo[:-4]
    if not repo:
        return None

    # https://github.com/owner/repo/blob/<ref>/<path>
    if len(segments) >= 5 and segments[2] in ("blob", "raw"):
        return GitHubLocation(owner, repo, segments[3], "/".join(segments[4:]))
    return GitHubLocation(owner, repo)


def decode_license_content(payload: Any) -> Optional[str]:
    """Decode the file content of a /repos/{owner}/{repo}/license response.

    Args:
        payload: Parsed JSON response.

    Returns:
        Decoded text, or None if the payload is not the expected shape.
    """
    if not isinstance(payload, dict):
        return None
    content = payload.get("content")
    if not isinstance(content, str):
        return None
    if payload.get("encoding", "base64") != "base64":
        return content
    try:
        return base64.b64decode(content).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None


class GitHubLicenseResolver(UriLicenseResolver):
    """Resolver that fetches LICENSE files from GitHub repositories.

    URLs pointing at a file (``/blob/<ref>/<path>``) are read from
    raw.githubusercontent.com as-is. Repository URLs are looked up through
    the GitHub licenses API first, then by trying common LICENSE file names
    on common branches.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        api_base_url: str = GITHUB_API_BASE_URL,
        raw_base_url: str = GITHUB_RAW_BASE_URL,
    ) -> None:
        """Initialize with an optional HTTP client.

        Args:
            client: Optional shared httpx.AsyncClient for connection reuse.
            api_base_url: GitHub REST API base address.
            raw_base_url: Raw content base address.
        """
        self._client = client
        self._api_base_url = api_base_url.rstrip("/")
        self._raw_base_url = raw_base_url.rstrip("/")

    async def can_resolve_url(self, url: httpx.URL, options: ResolverOptions) -> bool:
        return parse_github_url(url) is not None

    async def resolve_url(
        self, url: httpx.URL, options: ResolverOptions
    ) -> Optional[str]:
        """Resolve license text for a github.com URL.

        Args:
            url: github.com repository or file URL.
            options: Run options.

        Returns:
            Raw license text, or None if the repository has no license file.

        Raises:
            NetworkError: If the licenses API request fails in transport.
        """
        location = parse_github_url(url)
        if location is None:
            return None

        async def do_fetch(client: httpx.AsyncClient) -> Optional[str]:
            if location.path is not None and location.ref is not None:
                return await self._fetch_raw_file(
                    client, location, location.ref, location.path, options
                )
            return await self._fetch_api_license(
                client, location, options
            ) or await self._fetch_license_file(client, location, options)

        # Use provided client or create new one
        if self._client:
            return await do_fetch(self._client)

        async with httpx.AsyncClient() as new_client:
            return await do_fetch(new_client)

    async def _fetch_api_license(
        self,
        client: httpx.AsyncClient,
        location: GitHubLocation,
        options: ResolverOptions,
    ) -> Optional[str]:
        """Fetch the repository license through the GitHub licenses API.

        Args:
            client: HTTP client.
            location: Repository to look up.
            options: Run options.

        Returns:
            Decoded license file content, or None on any non-2xx answer or
            unexpected payload.

        Raises:
            NetworkError: If the request fails in transport.
        """
        api_url = f"{self._api_base_url}/repos/{location.owner}/{location.repo}/license"
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
        return decode_license_content(payload)

    async def _fetch_license_file(
        self,
        client: httpx.AsyncClient,
        location: GitHubLocation,
        options: ResolverOptions,
    ) -> Optional[str]:
        """Fetch LICENSE file content from GitHub raw URLs.

        Tries multiple branch names (main, master, HEAD) and LICENSE
        file variants (LICENSE, LICENSE.txt, etc.) until one succeeds.

        Args:
            client: HTTP client.
            location: Repository to look in.
            options: Run options.

        Returns:
            LICENSE file content as string, or None if not found.
        """
        for branch in BRANCHES:
            for license_file in LICENSE_FILES:
                try:
                    text = await self._fetch_raw_file(
                        client, location, branch, license_file, options
                    )
                except NetworkError:
                    # Network error - try next combination
                    continue
                if text:
                    return text
        return None

    async def _fetch_raw_file(
        self,
        client: httpx.AsyncClient,
        location: GitHubLocation,
        ref: str,
        path: str,
        options: ResolverOptions,
    ) -> Optional[str]:
        raw_url = (
            f"{self._raw_base_url}/{location.owner}/{location.repo}/{ref}/{path}"
        )
        try:
            response = await client.get(
                raw_url,
                headers={"User-Agent": options.user_agent},
                timeout=httpx.Timeout(options.timeout),
            )
        except httpx.RequestError as e:
            raise NetworkError(f"Failed to fetch {raw_url}: {e}") from e
        if response.status_code == 200:
            return response.text
        return None
