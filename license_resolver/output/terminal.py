"""Terminal output formatter using Rich."""
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from license_resolver.models.scan import ResolvedDependency, ScanResult, Verbosity

# Characters of license text shown per row in verbose mode
PREVIEW_LENGTH = 60


def _first_line(text: Optional[str]) -> str:
    if not text:
        return ""
    line = text.split("\r\n", 1)[0].strip()
    if len(line) > PREVIEW_LENGTH:
        line = line[: PREVIEW_LENGTH - 3] + "..."
    return line


class TerminalFormatter:
    """Format scan results for terminal display using Rich.

    Shows one row per dependency with the strategy that produced its
    license text; dependencies without text are highlighted.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        verbosity: Verbosity = Verbosity.NORMAL,
    ) -> None:
        """Initialize the formatter with a Rich console.

        Args:
            console: Optional Rich Console instance. If not provided,
                a new Console will be created.
            verbosity: Output verbosity level.
        """
        self._console = console if console is not None else Console()
        self._verbosity = verbosity

    def format_scan_result(self, result: ScanResult) -> None:
        """Display scan results as a Rich table.

        Args:
            result: The scan result to display.
        """
        if self._verbosity == Verbosity.QUIET:
            self._print_quiet_output(result)
            return

        if result.total_packages == 0:
            self._console.print("[yellow]No dependencies found[/yellow]")
            return

        self._print_summary(result)

        table = Table(title="License Text Resolution")
        table.add_column("Dependency", style="cyan", no_wrap=True)
        table.add_column("Source", style="magenta")
        table.add_column("Status")
        if self._verbosity == Verbosity.VERBOSE:
            table.add_column("First line", style="dim")

        for pkg in sorted(result.packages, key=lambda p: p.name.lower()):
            row = [escape(pkg.name), self._source_display(pkg), self._status_display(pkg)]
            if self._verbosity == Verbosity.VERBOSE:
                row.append(escape(_first_line(pkg.text)))
            table.add_row(*row)

        self._console.print(table)
        self._console.print(f"\n[bold]Total dependencies:[/bold] {result.total_packages}")
        self._console.print(f"[bold]Unresolved:[/bold] {result.unresolved_count}")

    def _source_display(self, pkg: ResolvedDependency) -> str:
        return pkg.source.value if pkg.source is not None else "-"

    def _status_display(self, pkg: ResolvedDependency) -> str:
        if pkg.resolved:
            return "[green]found[/green]"
        return "[yellow]not found[/yellow]"

    def _print_quiet_output(self, result: ScanResult) -> None:
        """Print only a status line and the unresolved dependencies.

        Args:
            result: The scan result to display.
        """
        if result.total_packages == 0:
            self._console.print("[yellow]No dependencies found[/yellow]")
            return

        if not result.has_unresolved:
            self._console.print(
                f"[green]PASS[/green] - License text found for all "
                f"{result.total_packages} dependencies"
            )
            return

        self._console.print(
            f"[red]UNRESOLVED[/red] - {result.unresolved_count} "
            f"dependenc{'y' if result.unresolved_count == 1 else 'ies'} "
            "without license text"
        )
        for pkg in result.packages:
            if not pkg.resolved:
                self._console.print(f"  - {escape(pkg.name)}")

    def _print_summary(self, result: ScanResult) -> None:
        """Print summary panel.

        Args:
            result: The scan result to summarize.
        """
        resolved = result.total_packages - result.unresolved_count
        if result.has_unresolved:
            status, color = "UNRESOLVED", "yellow"
        else:
            status, color = "PASS", "green"

        lines = [
            f"Total Dependencies: {result.total_packages}",
            f"License Text Found: {resolved}",
            f"Unresolved: {result.unresolved_count}",
            "",
            f"Status: [{color}]{status}[/{color}]",
        ]
        self._console.print(
            Panel("\n".join(lines), title="[bold]SUMMARY[/bold]", border_style=color)
        )
        self._console.print("")
