"""JSON output formatter for scan results."""
import json
from datetime import datetime, timezone
from typing import Any

from license_resolver import __version__
from license_resolver.models.scan import ScanResult


class ScanJsonFormatter:
    """Format scan results as JSON output.

    Carries the resolved license text of every dependency so the output can
    feed a notices generator.
    """

    def format_scan_result(self, result: ScanResult) -> str:
        """Format scan result as JSON string.

        Args:
            result: The scan result to format.

        Returns:
            JSON string representation of the scan result.
        """
        return json.dumps(self._build_output(result), indent=2)

    def _build_output(self, result: ScanResult) -> dict[str, Any]:
        generated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        return {
            "scan_metadata": {
                "generated_at": generated_at,
                "tool_version": __version__,
            },
            "summary": {
                "total_packages": result.total_packages,
                "resolved": result.total_packages - result.unresolved_count,
                "unresolved": result.unresolved_count,
                "status": "unresolved" if result.has_unresolved else "pass",
            },
            "packages": [
                {
                    "name": pkg.name,
                    "status": pkg.status.value,
                    "source": pkg.source.value if pkg.source is not None else None,
                    "license_text": pkg.text,
                }
                for pkg in sorted(result.packages, key=lambda p: p.name.lower())
            ],
        }
