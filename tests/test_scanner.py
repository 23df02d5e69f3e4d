"""Tests for dependency discovery and batch resolution."""
import asyncio
from importlib.metadata import PathDistribution
from io import StringIO
from pathlib import Path
from typing import Optional
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from rich.console import Console

from license_resolver.exceptions import ResolutionCancelled, ResolutionError
from license_resolver.models.config import ResolverOptions
from license_resolver.models.dependency import DependencyRecord, PackageMetadata
from license_resolver.models.resolution import (
    LicenseResolution,
    ResolutionSource,
    ResolutionStatus,
)
from license_resolver.resolvers.registry import ResolverRegistry
from license_resolver.scanner import (
    discover_dependencies,
    record_from_distribution,
    resolve_licenses,
)
from license_resolver.service import LicenseService


def make_distribution(
    site: Path,
    name: Optional[str],
    metadata_lines: tuple[str, ...] = (),
    files: Optional[dict[str, str]] = None,
) -> PathDistribution:
    """Create an installed distribution in a fake site-packages directory."""
    dist_info = site / f"{name or 'unnamed'}-1.0.dist-info"
    dist_info.mkdir(parents=True)
    header = ["Metadata-Version: 2.1"]
    if name:
        header.append(f"Name: {name}")
    header.append("Version: 1.0")
    (dist_info / "METADATA").write_text("\n".join(header + list(metadata_lines)) + "\n")

    record = [f"{dist_info.name}/METADATA,,", f"{dist_info.name}/RECORD,,"]
    for relative, content in (files or {}).items():
        target = site / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
        record.append(f"{relative},,")
    (dist_info / "RECORD").write_text("\n".join(record) + "\n")
    return PathDistribution(dist_info)


class TestRecordFromDistribution:
    """Tests for record_from_distribution()."""

    def test_metadata_fields(self, tmp_path: Path) -> None:
        """Test URLs and the license file are taken from the metadata."""
        dist = make_distribution(
            tmp_path,
            "foo",
            (
                "Home-page: https://example.com/foo",
                "Project-URL: Source, https://github.com/acme/foo",
                "Project-URL: License, https://opensource.org/licenses/MIT",
                "License-File: LICENSE.txt",
            ),
            {"foo-1.0.dist-info/licenses/LICENSE.txt": "MIT"},
        )

        record = record_from_distribution(dist)

        assert record is not None
        assert record.package is not None
        assert record.package.id == "foo"
        assert record.package.project_url == "https://example.com/foo"
        assert record.package.repository_url == "https://github.com/acme/foo"
        assert record.package.license_url == "https://opensource.org/licenses/MIT"
        assert record.package.license_relative_path == "LICENSE.txt"
        assert record.package_path == str(tmp_path / "foo-1.0.dist-info" / "licenses")

    def test_homepage_from_project_urls(self, tmp_path: Path) -> None:
        """Test a Homepage project URL is used without Home-page."""
        dist = make_distribution(
            tmp_path, "bar", ("Project-URL: Homepage, https://bar.example.com",)
        )

        record = record_from_distribution(dist)

        assert record is not None
        assert record.package is not None
        assert record.package.project_url == "https://bar.example.com"
        assert record.package.repository_url is None

    def test_undeclared_license_file(self, tmp_path: Path) -> None:
        """Test an installed license.md is found without License-File."""
        dist = make_distribution(
            tmp_path, "baz", files={"baz-1.0.dist-info/LICENSE.md": "BSD"}
        )

        record = record_from_distribution(dist)

        assert record is not None
        assert record.package is not None
        assert record.package.license_relative_path == "LICENSE.md"

    def test_no_license_file(self, tmp_path: Path) -> None:
        """Test distributions without a license file have no package path."""
        record = record_from_distribution(make_distribution(tmp_path, "qux"))

        assert record is not None
        assert record.package_path is None

    def test_unnamed_distribution(self, tmp_path: Path) -> None:
        """Test broken distributions without a name are skipped."""
        assert record_from_distribution(make_distribution(tmp_path, None)) is None


class TestDiscoverDependencies:
    """Tests for discover_dependencies()."""

    def test_sorted_by_name(self, tmp_path: Path) -> None:
        """Test records are returned sorted case-insensitively."""
        dists = [
            make_distribution(tmp_path, "zeta"),
            make_distribution(tmp_path, None),
            make_distribution(tmp_path, "Alpha"),
        ]

        with patch("license_resolver.scanner.distributions", return_value=dists):
            records = discover_dependencies()

        assert [r.display_name for r in records] == ["Alpha", "zeta"]


class TestResolveLicenses:
    """Tests for resolve_licenses()."""

    @staticmethod
    def records(tmp_path: Path) -> list[DependencyRecord]:
        found = tmp_path / "found"
        found.mkdir()
        (found / "license.txt").write_text("MIT")
        return [
            DependencyRecord(package=PackageMetadata(id="found"), package_path=str(found)),
            DependencyRecord(package=PackageMetadata(id="missing")),
        ]

    @pytest.mark.asyncio
    async def test_results_in_input_order(
        self, tmp_path: Path, options: ResolverOptions
    ) -> None:
        """Test every dependency is reported, resolved or not."""
        service = LicenseService(ResolverRegistry())

        results = await resolve_licenses(
            self.records(tmp_path), options, service=service, show_progress=False
        )

        assert [r.name for r in results] == ["found", "missing"]
        assert results[0].text == "MIT"
        assert results[0].source == ResolutionSource.PACKAGE_PATH
        assert results[1].status == ResolutionStatus.NOT_FOUND

    @pytest.mark.asyncio
    async def test_with_progress(self, tmp_path: Path, options: ResolverOptions) -> None:
        """Test the progress display path gives the same results."""
        console = Console(file=StringIO())

        results = await resolve_licenses(
            self.records(tmp_path),
            options,
            service=LicenseService(ResolverRegistry()),
            console=console,
        )

        assert [r.name for r in results] == ["found", "missing"]
        assert results[0].resolved

    @pytest.mark.asyncio
    async def test_creates_service_when_missing(
        self, tmp_path: Path, options: ResolverOptions
    ) -> None:
        """Test a default service is built around a shared client."""
        results = await resolve_licenses(
            self.records(tmp_path)[:1], options, show_progress=False
        )

        assert results[0].text == "MIT"

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self, options: ResolverOptions) -> None:
        """Test no more than max_concurrent resolutions run at once."""
        running = 0
        peak = 0

        async def slow_resolve(*args: object, **kwargs: object) -> object:
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1
            return LicenseResolution.not_found()

        service = MagicMock()
        service.resolve = slow_resolve
        records = [DependencyRecord(package=PackageMetadata(id=f"p{i}")) for i in range(10)]

        await resolve_licenses(
            records, options, service=service, show_progress=False, max_concurrent=3
        )

        assert peak <= 3

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(self, options: ResolverOptions) -> None:
        """Test unexpected failures surface as ResolutionError."""
        service = MagicMock()
        service.resolve = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(ResolutionError, match="boom"):
            await resolve_licenses(
                [DependencyRecord()], options, service=service, show_progress=False
            )

    @pytest.mark.asyncio
    async def test_cancellation_propagates(
        self, tmp_path: Path, options: ResolverOptions
    ) -> None:
        """Test a set cancellation signal aborts the batch."""
        cancel_event = asyncio.Event()
        cancel_event.set()

        with pytest.raises(ResolutionCancelled):
            await resolve_licenses(
                self.records(tmp_path),
                options,
                service=LicenseService(ResolverRegistry()),
                show_progress=False,
                cancel_event=cancel_event,
            )
