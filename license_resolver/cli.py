"""CLI entry point for license-resolver."""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal, Optional, TypeVar, cast

import click
import httpx
from rich.console import Console

from license_resolver import __version__
from license_resolver.config import ResolverConfig, load_config
from license_resolver.constants import (
    EXIT_ERROR,
    EXIT_SUCCESS,
    EXIT_UNRESOLVED,
    GITHUB_TOKEN_ENV,
)
from license_resolver.exceptions import ConfigurationError, LicenseResolverError
from license_resolver.log import configure_logging
from license_resolver.models.config import ResolverOptions
from license_resolver.models.dependency import (
    DependencyRecord,
    PackageMetadata,
    VersionInfo,
)
from license_resolver.models.resolution import LicenseResolution
from license_resolver.models.scan import ScanOptions, ScanResult, Verbosity
from license_resolver.output.scan_json import ScanJsonFormatter
from license_resolver.output.terminal import TerminalFormatter
from license_resolver.resolvers.registry import default_registry
from license_resolver.scanner import discover_dependencies, resolve_licenses
from license_resolver.service import LicenseService

# Module-level console for consistent output
_console = Console()
# Separate console for errors and log records (writes to stderr)
_error_console = Console(stderr=True)

F = TypeVar("F", bound=Callable[..., Any])


def _resolver_options(func: F) -> F:
    """Attach the options shared by every command."""
    options = [
        click.option(
            "--config",
            "-c",
            "config_path",
            type=click.Path(exists=True, dir_okay=False),
            default=None,
            help="Path to configuration file.",
        ),
        click.option(
            "--timeout",
            type=click.FloatRange(min=0, min_open=True),
            default=None,
            help="Network timeout in seconds (default: 30).",
        ),
        click.option(
            "--no-follow-redirects",
            "no_follow_redirects",
            is_flag=True,
            default=False,
            help="Do not follow redirects to find the final license URL.",
        ),
        click.option(
            "--github-token",
            envvar=GITHUB_TOKEN_ENV,
            default=None,
            help=f"GitHub token for API lookups (env: {GITHUB_TOKEN_ENV}).",
        ),
        click.option(
            "--verbose",
            "-v",
            "verbose_flag",
            is_flag=True,
            default=False,
            help="Show detailed resolution information.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """License Resolver - Find the license text of your dependencies.

    Tries package license files, license/repository/project URLs and
    binary version metadata in turn and prints normalized license text.

    \b
    Examples:
        license-resolver resolve --id foo --license-url https://opensource.org/licenses/MIT
        license-resolver resolve --package-dir ./packages/foo
        license-resolver scan
        license-resolver scan --format json --output licenses.json
    """
    pass


@main.command()
@click.option("--id", "package_id", default=None, help="Package identifier.")
@click.option("--license-url", default=None, help="License URL of the package.")
@click.option("--project-url", default=None, help="Project URL of the package.")
@click.option("--repository-url", default=None, help="Repository URL of the package.")
@click.option(
    "--license-path",
    "license_relative_path",
    default=None,
    help="License file path relative to --package-dir.",
)
@click.option(
    "--package-dir",
    "package_path",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory the package is installed in.",
)
@click.option(
    "--source-path",
    type=click.Path(dir_okay=False),
    default=None,
    help="File the dependency was found as (e.g. a DLL).",
)
@click.option("--product-name", default=None, help="Binary ProductName metadata.")
@click.option(
    "--file-name",
    default=None,
    help="Binary file name for version metadata (default: --source-path).",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write license text to file instead of stdout.",
)
@_resolver_options
def resolve(
    package_id: Optional[str],
    license_url: Optional[str],
    project_url: Optional[str],
    repository_url: Optional[str],
    license_relative_path: Optional[str],
    package_path: Optional[str],
    source_path: Optional[str],
    product_name: Optional[str],
    file_name: Optional[str],
    output_path: Optional[str],
    config_path: Optional[str],
    timeout: Optional[float],
    no_follow_redirects: bool,
    github_token: Optional[str],
    verbose_flag: bool,
) -> None:
    """Resolve the license text of a single dependency.

    \b
    Examples:
        license-resolver resolve --id Newtonsoft.Json \\
            --license-url https://licenses.nuget.org/MIT
        license-resolver resolve --package-dir ./foo --license-path LICENSE.txt --id foo
        license-resolver resolve --source-path bin/System.Web.dll \\
            --product-name "Microsoft\u00ae .NET Framework"
    """
    _setup_logging(verbose_flag)

    package_fields = (
        package_id, license_url, project_url, repository_url, license_relative_path
    )
    if product_name and not (file_name or source_path):
        raise click.UsageError("--product-name needs --file-name or --source-path.")

    package = None
    if any(package_fields):
        package = PackageMetadata(
            id=package_id or None,
            license_url=license_url,
            project_url=project_url,
            repository_url=repository_url,
            license_relative_path=license_relative_path,
        )
    version_info = None
    if product_name or file_name:
        version_info = VersionInfo(
            file_name=cast(str, file_name or source_path),
            product_name=product_name,
        )
    dependency = DependencyRecord(
        package=package,
        package_path=package_path,
        source_path=source_path,
        version_info=version_info,
    )

    try:
        config = load_config(config_path)
        options = _build_options(config, timeout, no_follow_redirects, github_token)
        resolution = asyncio.run(_resolve_one(dependency, options))

        if not resolution.found:
            _error_console.print(
                f"[yellow]No license text found for {dependency.display_name}[/yellow]"
            )
            sys.exit(EXIT_UNRESOLVED)

        if verbose_flag:
            _error_console.print(
                f"[green]Resolved from {resolution.source.value if resolution.source else '-'}"
                f" ({resolution.key})[/green]"
            )
        text = cast(str, resolution.text)
        if output_path:
            _write_output_to_file(text, output_path)
        else:
            click.echo(text)
        sys.exit(EXIT_SUCCESS)

    except LicenseResolverError as e:
        _display_error(e)
        sys.exit(EXIT_ERROR)


@main.command()
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["terminal", "json"], case_sensitive=False),
    default="terminal",
    help="Output format for scan results (default: terminal).",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write report to file instead of stdout.",
)
@click.option(
    "--quiet",
    "-q",
    "quiet_flag",
    is_flag=True,
    default=False,
    help="Only list dependencies without license text.",
)
@_resolver_options
def scan(
    output_format: str,
    output_path: Optional[str],
    quiet_flag: bool,
    config_path: Optional[str],
    timeout: Optional[float],
    no_follow_redirects: bool,
    github_token: Optional[str],
    verbose_flag: bool,
) -> None:
    """Resolve license text for every installed Python distribution.

    \b
    Examples:
        license-resolver scan
        license-resolver scan --format json --output licenses.json
        license-resolver scan --quiet
        license-resolver scan --config custom-config.yaml
    """
    if verbose_flag and quiet_flag:
        raise click.UsageError("--verbose and --quiet are mutually exclusive.")

    if quiet_flag:
        verbosity = Verbosity.QUIET
    elif verbose_flag:
        verbosity = Verbosity.VERBOSE
    else:
        verbosity = Verbosity.NORMAL

    format_value = cast(Literal["terminal", "json"], output_format.lower())
    scan_options = ScanOptions(format=format_value, verbosity=verbosity)
    _setup_logging(verbose_flag)

    try:
        config = load_config(config_path)
        options = _build_options(config, timeout, no_follow_redirects, github_token)
        result = _run_scan(scan_options, config, options)
        _display_result(result, scan_options, output_path)

        if result.has_unresolved:
            sys.exit(EXIT_UNRESOLVED)
        sys.exit(EXIT_SUCCESS)

    except LicenseResolverError as e:
        _display_error(e)
        sys.exit(EXIT_ERROR)


def _setup_logging(verbose: bool) -> None:
    configure_logging(
        level=logging.DEBUG if verbose else logging.WARNING,
        console=_error_console,
    )


def _build_options(
    config: ResolverConfig,
    timeout: Optional[float],
    no_follow_redirects: bool,
    github_token: Optional[str],
) -> ResolverOptions:
    """Merge command line flags over the configuration file."""
    return config.to_options(
        github_token=github_token,
        timeout=timeout,
        follow_redirects=False if no_follow_redirects else None,
    )


async def _resolve_one(
    dependency: DependencyRecord, options: ResolverOptions
) -> LicenseResolution:
    async with httpx.AsyncClient() as client:
        service = LicenseService(default_registry(client), client=client)
        return await service.resolve(dependency, options)


def _run_scan(
    scan_options: ScanOptions, config: ResolverConfig, options: ResolverOptions
) -> ScanResult:
    """Discover installed distributions and resolve their license text.

    Args:
        scan_options: Output options (progress is shown for terminal output).
        config: Loaded configuration.
        options: Run options.

    Returns:
        ScanResult with every dependency and its resolution.
    """
    records = discover_dependencies()
    show_progress = (
        scan_options.format == "terminal" and scan_options.verbosity != Verbosity.QUIET
    )
    resolved = asyncio.run(
        resolve_licenses(
            records,
            options,
            console=_console if show_progress else None,
            show_progress=show_progress,
            max_concurrent=config.max_concurrent_requests,
        )
    )
    return ScanResult.from_resolved(resolved)


def _display_result(
    result: ScanResult, scan_options: ScanOptions, output_path: Optional[str] = None
) -> None:
    """Display scan results in the specified format.

    Args:
        result: The scan result to display.
        scan_options: Scan options including format.
        output_path: Optional file path to write output to.
    """
    if scan_options.format == "terminal" and not output_path:
        TerminalFormatter(
            console=_console, verbosity=scan_options.verbosity
        ).format_scan_result(result)
        return

    # Files always get JSON; a Rich table does not survive redirection
    content = ScanJsonFormatter().format_scan_result(result)
    if output_path:
        _write_output_to_file(content, output_path)
    else:
        click.echo(content)


def _write_output_to_file(content: str, path: str) -> None:
    """Write content to file, keeping its line endings as they are.

    Args:
        content: The content to write.
        path: The file path to write to.

    Raises:
        ConfigurationError: If file cannot be written.
    """
    file_path = Path(path)

    try:
        if file_path.exists():
            _error_console.print(
                f"[yellow]Warning: Overwriting existing file: {path}[/yellow]"
            )
        with file_path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as e:
        raise ConfigurationError(f"Cannot write to file '{path}': {e}") from e

    _error_console.print(f"[green]Written to {path}[/green]")


def _display_error(error: LicenseResolverError) -> None:
    """Display error message on stderr.

    Args:
        error: The exception that occurred.
    """
    _error_console.print(f"[red bold]Error: {type(error).__name__}: {error}[/red bold]")


if __name__ == "__main__":
    main()
