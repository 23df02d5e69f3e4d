"""License resolution chain for a single dependency.

Resolution order:
1. License file named by the package metadata (relative to the package dir)
2. License URL, resolved as given
3. Repository URL, resolved as given
4. Project URL, resolved as given
5. license.txt / license.md in the package directory
6. license file next to the source file
7. Binary version metadata
8. License URL, resolved through its final redirect target
9. Repository URL, resolved through its final redirect target
10. Project URL, resolved through its final redirect target

The first step that produces normalized text wins. Any error inside a step
is logged and treated as "nothing found" for that step only. Filesystem
access runs in worker threads.
"""

import asyncio
import logging
import os
import re
from collections.abc import Awaitable, Sequence
from pathlib import Path
from typing import Callable, NamedTuple, Optional

import httpx

from license_resolver.cache import LicenseCache
from license_resolver.exceptions import ResolutionCancelled
from license_resolver.fetch import (
    parse_absolute_url,
    raise_if_cancelled,
    resolve_from_final_url,
    resolve_from_url,
)
from license_resolver.models.config import ResolverOptions
from license_resolver.models.dependency import DependencyRecord
from license_resolver.models.resolution import LicenseResolution, ResolutionSource
from license_resolver.normalize import normalize_license_text
from license_resolver.resolvers.base import UriLicenseResolver
from license_resolver.resolvers.registry import ResolverRegistry, default_registry

logger = logging.getLogger(__name__)

LICENSE_EXTENSIONS = (".txt", ".md")
LICENSE_FILE_RE = re.compile(r"^license\.(?:txt|md)$", re.IGNORECASE)


class UrlStep(NamedTuple):
    """A URL-bearing step of the chain."""

    field: str  # PackageMetadata attribute holding the URL
    family: str  # ResolverRegistry attribute with the resolvers to use
    use_final_url: bool


URL_STEPS: dict[ResolutionSource, UrlStep] = {
    ResolutionSource.LICENSE_URL: UrlStep("license_url", "license_url", False),
    ResolutionSource.REPOSITORY_URL: UrlStep(
        "repository_url", "repository_url", False
    ),
    ResolutionSource.PROJECT_URL: UrlStep("project_url", "project_url", False),
    ResolutionSource.FINAL_LICENSE_URL: UrlStep("license_url", "license_url", True),
    ResolutionSource.FINAL_REPOSITORY_URL: UrlStep(
        "repository_url", "repository_url", True
    ),
    ResolutionSource.FINAL_PROJECT_URL: UrlStep("project_url", "project_url", True),
}

RESOLUTION_ORDER: tuple[ResolutionSource, ...] = (
    ResolutionSource.LICENSE_RELATIVE_PATH,
    ResolutionSource.LICENSE_URL,
    ResolutionSource.REPOSITORY_URL,
    ResolutionSource.PROJECT_URL,
    ResolutionSource.PACKAGE_PATH,
    ResolutionSource.SOURCE_PATH,
    ResolutionSource.VERSION_INFO,
    ResolutionSource.FINAL_LICENSE_URL,
    ResolutionSource.FINAL_REPOSITORY_URL,
    ResolutionSource.FINAL_PROJECT_URL,
)

Step = Callable[
    [ResolutionSource, DependencyRecord, ResolverOptions, Optional[asyncio.Event]],
    Awaitable[LicenseResolution],
]


def read_license_file(path: Path) -> str:
    """Read a license file from disk."""
    return path.read_text(encoding="utf-8")


def find_license_file(directory: Path, pattern: re.Pattern[str]) -> Optional[Path]:
    """Find the first file directly inside a directory whose name matches.

    Subdirectories are not searched. Names are tried in sorted order.

    Args:
        directory: Directory to list.
        pattern: Pattern matched against the bare file name.

    Returns:
        Path of the matching file, or None.

    Raises:
        OSError: If the directory cannot be listed.
    """
    with os.scandir(directory) as entries:
        names = sorted(entry.name for entry in entries if entry.is_file())
    for name in names:
        if pattern.match(name):
            return directory / name
    return None


def source_license_pattern(source_path: Path) -> re.Pattern[str]:
    """Pattern for license files belonging to a source file.

    Matches ``license.txt`` / ``license.md`` and ``<stem>-license.txt``
    style names (separators ``-``, ``_`` and ``+``), ignoring case.
    """
    stem = re.escape(source_path.stem)
    return re.compile(rf"^(?:{stem}[-_+])?license\.(?:txt|md)$", re.IGNORECASE)


class LicenseService:
    """Resolve normalized license text for dependencies.

    One service is meant to live for one run: it owns the LicenseCache that
    memoizes results under every key identifying a dependency, so asking
    again for an already resolved dependency does no I/O.
    """

    def __init__(
        self,
        registry: Optional[ResolverRegistry] = None,
        cache: Optional[LicenseCache] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the service.

        Args:
            registry: Resolver families. Defaults to the built-in resolvers.
            cache: Cache to use. A fresh one is created if not provided.
            client: Optional shared httpx.AsyncClient for connection reuse.
        """
        self._registry = registry if registry is not None else default_registry(client)
        self._cache = cache if cache is not None else LicenseCache()
        self._client = client
        self._steps: dict[ResolutionSource, Step] = {
            ResolutionSource.LICENSE_RELATIVE_PATH: self._from_license_relative_path,
            ResolutionSource.PACKAGE_PATH: self._from_package_path,
            ResolutionSource.SOURCE_PATH: self._from_source_path,
            ResolutionSource.VERSION_INFO: self._from_version_info,
        }
        for source in URL_STEPS:
            self._steps[source] = self._from_url

    @property
    def cache(self) -> LicenseCache:
        """The cache owned by this service."""
        return self._cache

    async def resolve_license(
        self,
        dependency: DependencyRecord,
        options: ResolverOptions,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Optional[str]:
        """Resolve the license text of a dependency.

        Args:
            dependency: Dependency to resolve.
            options: Run options.
            cancel_event: Optional cancellation signal.

        Returns:
            Normalized license text, or None if no strategy found any.

        Raises:
            ResolutionCancelled: If the cancellation signal is observed.
        """
        resolution = await self.resolve(dependency, options, cancel_event)
        return resolution.text

    async def resolve(
        self,
        dependency: DependencyRecord,
        options: ResolverOptions,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> LicenseResolution:
        """Run the resolution chain and report which strategy succeeded.

        Args:
            dependency: Dependency to resolve.
            options: Run options.
            cancel_event: Optional cancellation signal, checked before
                every step.

        Returns:
            FOUND resolution from the first successful step, or NOT_FOUND.

        Raises:
            ResolutionCancelled: If the cancellation signal is observed.
        """
        package_id = dependency.package_id
        cached = self._cache.get(package_id)
        if cached is not None:
            return LicenseResolution.found_text(
                cached, ResolutionSource.CACHE, package_id
            )

        for source in RESOLUTION_ORDER:
            raise_if_cancelled(cancel_event)
            resolution = await self._steps[source](
                source, dependency, options, cancel_event
            )
            if resolution.found:
                logger.debug(
                    "Resolved license for %s from %s (%s)",
                    dependency.display_name,
                    source.value,
                    resolution.key,
                )
                return resolution

        logger.debug("No license found for %s", dependency.display_name)
        return LicenseResolution.not_found()

    def _found(
        self,
        text: str,
        source: ResolutionSource,
        key: str,
        dependency: DependencyRecord,
    ) -> LicenseResolution:
        self._cache.put_many((dependency.package_id, key), text)
        return LicenseResolution.found_text(text, source, key)

    def _failed(
        self, source: ResolutionSource, key: str, error: Exception
    ) -> LicenseResolution:
        logger.debug("Unable to resolve %s", key, exc_info=error)
        return LicenseResolution.failed(source, key, error)

    async def _from_license_relative_path(
        self,
        source: ResolutionSource,
        dependency: DependencyRecord,
        options: ResolverOptions,
        cancel_event: Optional[asyncio.Event],
    ) -> LicenseResolution:
        package = dependency.package
        if (
            not dependency.package_path
            or package is None
            or not package.license_relative_path
        ):
            return LicenseResolution.not_found(source)

        license_path = Path(dependency.package_path) / package.license_relative_path
        key = str(license_path)
        try:
            cached = self._cache.get(key)
            if cached is not None:
                return self._found(cached, source, key, dependency)
            if not key.lower().endswith(LICENSE_EXTENSIONS):
                return LicenseResolution.not_found(source, key)
            if not await asyncio.to_thread(license_path.is_file):
                return LicenseResolution.not_found(source, key)
            raw = await asyncio.to_thread(read_license_file, license_path)
            text = normalize_license_text(raw)
        except ResolutionCancelled:
            raise
        except Exception as e:
            return self._failed(source, key, e)

        if text is None:
            return LicenseResolution.not_found(source, key)
        return self._found(text, source, key, dependency)

    async def _from_package_path(
        self,
        source: ResolutionSource,
        dependency: DependencyRecord,
        options: ResolverOptions,
        cancel_event: Optional[asyncio.Event],
    ) -> LicenseResolution:
        if not dependency.package_path:
            return LicenseResolution.not_found(source)

        key = dependency.package_path
        cached = self._cache.get(key)
        if cached is not None:
            return self._found(cached, source, key, dependency)
        try:
            license_path = await asyncio.to_thread(
                find_license_file, Path(key), LICENSE_FILE_RE
            )
            if license_path is None:
                return LicenseResolution.not_found(source, key)
            raw = await asyncio.to_thread(read_license_file, license_path)
            text = normalize_license_text(raw)
        except Exception as e:
            return self._failed(source, key, e)

        if text is None:
            return LicenseResolution.not_found(source, key)
        return self._found(text, source, key, dependency)

    async def _from_source_path(
        self,
        source: ResolutionSource,
        dependency: DependencyRecord,
        options: ResolverOptions,
        cancel_event: Optional[asyncio.Event],
    ) -> LicenseResolution:
        if not dependency.source_path:
            return LicenseResolution.not_found(source)

        key = dependency.source_path
        cached = self._cache.get(key)
        if cached is not None:
            return self._found(cached, source, key, dependency)
        try:
            source_path = Path(key)
            # A bare file name has no directory to search
            if not os.path.dirname(key):
                return LicenseResolution.not_found(source, key)
            license_path = await asyncio.to_thread(
                find_license_file,
                source_path.parent,
                source_license_pattern(source_path),
            )
            if license_path is None:
                return LicenseResolution.not_found(source, key)
            raw = await asyncio.to_thread(read_license_file, license_path)
            text = normalize_license_text(raw)
        except Exception as e:
            return self._failed(source, key, e)

        if text is None:
            return LicenseResolution.not_found(source, key)
        return self._found(text, source, key, dependency)

    async def _from_version_info(
        self,
        source: ResolutionSource,
        dependency: DependencyRecord,
        options: ResolverOptions,
        cancel_event: Optional[asyncio.Event],
    ) -> LicenseResolution:
        version_info = dependency.version_info
        if version_info is None:
            return LicenseResolution.not_found(source)

        key = version_info.file_name
        cached = self._cache.get(key)
        if cached is not None:
            return self._found(cached, source, key, dependency)
        try:
            for resolver in self._registry.version_info:
                if not await resolver.can_resolve_version_info(version_info, options):
                    continue
                text = normalize_license_text(
                    await resolver.resolve_version_info(version_info, options)
                )
                if text is not None:
                    return self._found(text, source, key, dependency)
                raise_if_cancelled(cancel_event)
        except ResolutionCancelled:
            raise
        except Exception as e:
            return self._failed(source, key, e)
        return LicenseResolution.not_found(source, key)

    async def _from_url(
        self,
        source: ResolutionSource,
        dependency: DependencyRecord,
        options: ResolverOptions,
        cancel_event: Optional[asyncio.Event],
    ) -> LicenseResolution:
        step = URL_STEPS[source]
        package = dependency.package
        raw_url: Optional[str] = (
            getattr(package, step.field) if package is not None else None
        )
        if not raw_url:
            return LicenseResolution.not_found(source)

        cached = self._cache.get(raw_url)
        if cached is not None:
            return self._found(cached, source, raw_url, dependency)

        url = parse_absolute_url(raw_url)
        if url is None:
            logger.debug("Skipping malformed URL %r", raw_url)
            return LicenseResolution.not_found(source, raw_url)
        if step.use_final_url and not options.follow_redirects:
            return LicenseResolution.not_found(source, raw_url)

        resolvers: Sequence[UriLicenseResolver] = getattr(self._registry, step.family)
        try:
            if step.use_final_url:
                text = await resolve_from_final_url(
                    url, resolvers, options, self._client, cancel_event
                )
            else:
                text = await resolve_from_url(url, resolvers, options, cancel_event)
        except ResolutionCancelled:
            raise
        except Exception as e:
            return self._failed(source, raw_url, e)

        if text is None:
            return LicenseResolution.not_found(source, raw_url)
        return self._found(text, source, raw_url, dependency)
