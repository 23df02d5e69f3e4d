"""Output formatters for license-resolver."""

from license_resolver.output.scan_json import ScanJsonFormatter
from license_resolver.output.terminal import TerminalFormatter

__all__ = [
    "ScanJsonFormatter",
    "TerminalFormatter",
]
