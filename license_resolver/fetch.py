"""URL strategies: resolve a URL directly or through its final redirect target."""

import asyncio
import logging
from collections.abc import Sequence
from typing import Optional

import httpx

from license_resolver.exceptions import NetworkError, ResolutionCancelled
from license_resolver.models.config import ResolverOptions
from license_resolver.normalize import normalize_license_text
from license_resolver.resolvers.base import UriLicenseResolver

logger = logging.getLogger(__name__)

PLAIN_TEXT_MEDIA_TYPE = "text/plain"
TXT_SUFFIX = ".txt"


def raise_if_cancelled(cancel_event: Optional[asyncio.Event]) -> None:
    """Raise ResolutionCancelled if the cancellation signal is set."""
    if cancel_event is not None and cancel_event.is_set():
        raise ResolutionCancelled("License resolution was cancelled")


def parse_absolute_url(value: Optional[str]) -> Optional[httpx.URL]:
    """Parse a URL taken from package metadata.

    Args:
        value: Raw URL string.

    Returns:
        httpx.URL if the value is a well-formed absolute URL with a host,
        otherwise None.
    """
    if not value or not value.strip():
        return None
    try:
        url = httpx.URL(value.strip())
    except (httpx.InvalidURL, TypeError):
        return None
    if not url.is_absolute_url or not url.host:
        return None
    return url


def media_type(response: httpx.Response) -> Optional[str]:
    """Return the media type of a response without its parameters."""
    content_type = response.headers.get("content-type")
    if not content_type:
        return None
    return content_type.split(";", 1)[0].strip().lower()


def strip_txt_suffix(url: httpx.URL) -> Optional[httpx.URL]:
    """Return the URL without a trailing .txt on its path, or None."""
    if not url.path.endswith(TXT_SUFFIX):
        return None
    return url.copy_with(path=url.path[: -len(TXT_SUFFIX)])


async def resolve_from_url(
    url: httpx.URL,
    resolvers: Sequence[UriLicenseResolver],
    options: ResolverOptions,
    cancel_event: Optional[asyncio.Event] = None,
) -> Optional[str]:
    """Resolve a URL with the first resolver that accepts it and yields text.

    No request is made here beyond what the resolvers themselves do.

    Args:
        url: Absolute URL.
        resolvers: Resolver family in priority order.
        options: Run options.
        cancel_event: Optional cancellation signal, checked between resolvers.

    Returns:
        Normalized license text, or None.
    """
    for resolver in resolvers:
        if not await resolver.can_resolve_url(url, options):
            continue
        license_text = normalize_license_text(await resolver.resolve_url(url, options))
        if license_text is not None:
            return license_text
        raise_if_cancelled(cancel_event)
    return None


async def _get(
    client: httpx.AsyncClient, url: httpx.URL, options: ResolverOptions
) -> httpx.Response:
    try:
        return await client.get(
            url,
            headers={"User-Agent": options.user_agent},
            follow_redirects=True,
            timeout=httpx.Timeout(options.timeout),
        )
    except httpx.RequestError as e:
        raise NetworkError(f"Failed to fetch {url}: {e}") from e


async def resolve_from_final_url(
    url: httpx.URL,
    resolvers: Sequence[UriLicenseResolver],
    options: ResolverOptions,
    client: Optional[httpx.AsyncClient] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> Optional[str]:
    """Resolve a URL by following its redirects.

    The URL is fetched with redirects followed. A failed request for a
    ``.txt`` path is retried once without the extension. If the request
    ended up somewhere else, the resolvers get a second chance on the final
    URL, even when it answered with an error status. Failing that, a
    successful ``text/plain`` body is taken as the license text.

    Args:
        url: Absolute URL.
        resolvers: Resolver family in priority order.
        options: Run options.
        client: Optional shared httpx.AsyncClient. If not provided,
            a new client will be created.
        cancel_event: Optional cancellation signal.

    Returns:
        Normalized license text, or None if nothing usable was served.

    Raises:
        NetworkError: If a request fails in transport.
        ResolutionCancelled: If the cancellation signal is observed.
    """

    async def do_fetch(c: httpx.AsyncClient) -> Optional[str]:
        response = await _get(c, url, options)
        fallback = strip_txt_suffix(url)
        if not response.is_success and fallback is not None:
            raise_if_cancelled(cancel_event)
            logger.debug("Retrying %s without .txt extension", url)
            response = await _get(c, fallback, options)
            if not response.is_success:
                return None

        # An error page at the end of a redirect still names a usable URL
        final_url = response.url
        if final_url != url:
            logger.debug("%s redirected to %s", url, final_url)
            license_text = await resolve_from_url(
                final_url, resolvers, options, cancel_event
            )
            if license_text is not None:
                return license_text

        # No resolver knows the final URL; take the body only if it is plain text
        if not response.is_success or media_type(response) != PLAIN_TEXT_MEDIA_TYPE:
            return None
        raise_if_cancelled(cancel_event)
        return normalize_license_text(response.text)

    if client:
        return await do_fetch(client)

    async with httpx.AsyncClient() as new_client:
        return await do_fetch(new_client)
