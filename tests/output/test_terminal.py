"""Tests for the terminal output formatter."""
from io import StringIO

from rich.console import Console

from license_resolver.models.resolution import ResolutionSource, ResolutionStatus
from license_resolver.models.scan import ResolvedDependency, ScanResult, Verbosity
from license_resolver.output.terminal import PREVIEW_LENGTH, TerminalFormatter


def make_console() -> tuple[Console, StringIO]:
    output = StringIO()
    return Console(file=output, width=160, force_terminal=False), output


def sample_result() -> ScanResult:
    return ScanResult.from_resolved(
        [
            ResolvedDependency(
                name="requests",
                status=ResolutionStatus.FOUND,
                source=ResolutionSource.PACKAGE_PATH,
                text="Apache License\r\nVersion 2.0",
            ),
            ResolvedDependency(name="mystery", status=ResolutionStatus.NOT_FOUND),
        ]
    )


class TestTerminalFormatter:
    """Tests for TerminalFormatter."""

    def test_table_lists_dependencies(self) -> None:
        """Test every dependency appears with its source and status."""
        console, output = make_console()

        TerminalFormatter(console=console).format_scan_result(sample_result())

        text = output.getvalue()
        assert "License Text Resolution" in text
        assert "requests" in text
        assert "package_path" in text
        assert "mystery" in text
        assert "not found" in text
        assert "Unresolved: 1" in text

    def test_summary_status(self) -> None:
        """Test the summary panel reports unresolved dependencies."""
        console, output = make_console()

        TerminalFormatter(console=console).format_scan_result(sample_result())

        assert "SUMMARY" in output.getvalue()
        assert "UNRESOLVED" in output.getvalue()

    def test_verbose_shows_first_line(self) -> None:
        """Test verbose output previews the license text."""
        console, output = make_console()

        TerminalFormatter(
            console=console, verbosity=Verbosity.VERBOSE
        ).format_scan_result(sample_result())

        assert "Apache License" in output.getvalue()
        assert "Version 2.0" not in output.getvalue()

    def test_long_first_line_is_truncated(self) -> None:
        """Test previews never exceed the preview length."""
        console, output = make_console()
        result = ScanResult.from_resolved(
            [
                ResolvedDependency(
                    name="long",
                    status=ResolutionStatus.FOUND,
                    source=ResolutionSource.LICENSE_URL,
                    text="x" * (PREVIEW_LENGTH * 2),
                )
            ]
        )

        TerminalFormatter(
            console=console, verbosity=Verbosity.VERBOSE
        ).format_scan_result(result)

        assert "x" * (PREVIEW_LENGTH - 3) + "..." in output.getvalue()

    def test_quiet_lists_only_unresolved(self) -> None:
        """Test quiet output names only dependencies without text."""
        console, output = make_console()

        TerminalFormatter(console=console, verbosity=Verbosity.QUIET).format_scan_result(
            sample_result()
        )

        text = output.getvalue()
        assert "UNRESOLVED" in text
        assert "mystery" in text
        assert "requests" not in text

    def test_quiet_pass(self) -> None:
        """Test quiet output for a fully resolved scan."""
        console, output = make_console()
        result = ScanResult.from_resolved(
            [
                ResolvedDependency(
                    name="a",
                    status=ResolutionStatus.FOUND,
                    source=ResolutionSource.CACHE,
                    text="MIT",
                )
            ]
        )

        TerminalFormatter(console=console, verbosity=Verbosity.QUIET).format_scan_result(
            result
        )

        assert "PASS" in output.getvalue()

    def test_no_dependencies(self) -> None:
        """Test an empty scan is reported."""
        console, output = make_console()

        TerminalFormatter(console=console).format_scan_result(ScanResult())

        assert "No dependencies found" in output.getvalue()

    def test_markup_in_names_is_escaped(self) -> None:
        """Test names with brackets are printed literally."""
        console, output = make_console()
        result = ScanResult.from_resolved(
            [ResolvedDependency(name="pkg[extra]", status=ResolutionStatus.NOT_FOUND)]
        )

        TerminalFormatter(console=console).format_scan_result(result)

        assert "pkg[extra]" in output.getvalue()
