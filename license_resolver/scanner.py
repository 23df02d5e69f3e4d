"""Dependency discovery and concurrent license text resolution."""
import asyncio
from importlib.metadata import Distribution, distributions
from pathlib import Path, PurePosixPath
from typing import Optional

import httpx
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

from license_resolver.constants import MAX_CONCURRENT_REQUESTS
from license_resolver.exceptions import ResolutionCancelled, ResolutionError
from license_resolver.models.config import ResolverOptions
from license_resolver.models.dependency import DependencyRecord, PackageMetadata
from license_resolver.models.scan import ResolvedDependency
from license_resolver.resolvers.registry import default_registry
from license_resolver.service import LICENSE_FILE_RE, LicenseService

# Project-URL labels, lower-cased, in order of preference
REPOSITORY_LABELS = ("repository", "source", "source code", "github", "code")
HOMEPAGE_LABELS = ("homepage", "home")
LICENSE_LABELS = ("license", "licence")


def _project_urls(dist: Distribution) -> dict[str, str]:
    """Parse ``Project-URL: label, url`` entries into a label -> URL map."""
    urls: dict[str, str] = {}
    for entry in dist.metadata.get_all("Project-URL") or []:
        label, _, url = entry.partition(",")
        if url.strip():
            urls.setdefault(label.strip().lower(), url.strip())
    return urls


def _first_url(urls: dict[str, str], labels: tuple[str, ...]) -> Optional[str]:
    for label in labels:
        if label in urls:
            return urls[label]
    return None


def _license_location(dist: Distribution) -> tuple[Optional[str], Optional[str]]:
    """Locate the distribution's license file on disk.

    Declared ``License-File`` entries are preferred; otherwise any installed
    file named license.txt / license.md is used.

    Returns:
        (directory, file name) of the license file, or (None, None).
    """
    declared = dist.metadata.get_all("License-File") or []
    candidates = []
    for file in dist.files or []:
        posix_name = str(file).replace("\\", "/")
        name = PurePosixPath(posix_name).name
        if any(posix_name.endswith(entry) for entry in declared):
            candidates.insert(0, file)
        elif LICENSE_FILE_RE.match(name):
            candidates.append(file)

    if not candidates:
        return None, None
    located = Path(str(candidates[0].locate()))
    return str(located.parent), located.name


def record_from_distribution(dist: Distribution) -> Optional[DependencyRecord]:
    """Build a DependencyRecord from an installed distribution.

    Args:
        dist: Installed distribution.

    Returns:
        DependencyRecord, or None if the distribution has no name.
    """
    name = dist.metadata.get("Name")
    if not name:
        return None

    urls = _project_urls(dist)
    package_path, license_file = _license_location(dist)
    return DependencyRecord(
        package=PackageMetadata(
            id=name,
            license_url=_first_url(urls, LICENSE_LABELS),
            project_url=dist.metadata.get("Home-page")
            or _first_url(urls, HOMEPAGE_LABELS),
            repository_url=_first_url(urls, REPOSITORY_LABELS),
            license_relative_path=license_file,
        ),
        package_path=package_path,
    )


def discover_dependencies() -> list[DependencyRecord]:
    """Discover all installed distributions in the current environment.

    Returns:
        DependencyRecords sorted by package name. Distributions with
        missing names are skipped.
    """
    records: list[DependencyRecord] = []
    for dist in distributions():
        record = record_from_distribution(dist)
        if record is not None:
            records.append(record)

    # Sort by name for deterministic output
    return sorted(records, key=lambda r: r.display_name.lower())


async def resolve_licenses(
    records: list[DependencyRecord],
    options: ResolverOptions,
    service: Optional[LicenseService] = None,
    console: Optional[Console] = None,
    show_progress: bool = True,
    max_concurrent: int = MAX_CONCURRENT_REQUESTS,
    cancel_event: Optional[asyncio.Event] = None,
) -> list[ResolvedDependency]:
    """Resolve license text for many dependencies concurrently.

    Each dependency runs its own resolution chain; at most
    ``max_concurrent`` chains run at once. All of them share one service,
    and therefore one cache.

    Args:
        records: Dependencies to resolve.
        options: Run options.
        service: Service to use. If not provided, one is created around a
            shared httpx.AsyncClient for the duration of the call.
        console: Optional Rich Console for progress display.
        show_progress: Whether to show progress indicator (default: True).
        max_concurrent: Maximum number of dependencies resolved at once.
        cancel_event: Optional cancellation signal.

    Returns:
        ResolvedDependency list in input order. Dependencies without
        license text are included with status NOT_FOUND.

    Raises:
        ResolutionCancelled: If the cancellation signal is observed.
        ResolutionError: If resolving a dependency raised unexpectedly.
    """
    if service is None:
        # Use shared HTTP client for connection reuse
        async with httpx.AsyncClient() as client:
            shared = LicenseService(default_registry(client), client=client)
            return await resolve_licenses(
                records,
                options,
                service=shared,
                console=console,
                show_progress=show_progress,
                max_concurrent=max_concurrent,
                cancel_event=cancel_event,
            )

    semaphore = asyncio.Semaphore(max_concurrent)

    async def resolve_one(idx: int, record: DependencyRecord) -> tuple[int, ResolvedDependency]:
        async with semaphore:
            resolution = await service.resolve(record, options, cancel_event)
        return idx, ResolvedDependency.from_resolution(record.display_name, resolution)

    resolved: list[Optional[ResolvedDependency]] = [None] * len(records)
    tasks = [resolve_one(i, record) for i, record in enumerate(records)]

    try:
        if console is not None and show_progress and records:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                console=console,
                transient=True,
            ) as progress:
                task_id = progress.add_task(
                    f"Resolving license text for {len(records)} dependencies...",
                    total=len(records),
                )
                # Process concurrently, updating progress as each completes
                for coro in asyncio.as_completed(tasks):
                    idx, result = await coro
                    resolved[idx] = result
                    progress.advance(task_id)
        else:
            for idx, result in await asyncio.gather(*tasks):
                resolved[idx] = result
    except (ResolutionCancelled, asyncio.CancelledError):
        raise
    except Exception as e:
        raise ResolutionError(f"License resolution failed: {e}") from e

    return [item for item in resolved if item is not None]
