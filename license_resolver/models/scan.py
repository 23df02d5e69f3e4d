"""Scan-related Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field

from license_resolver.models.resolution import (
    LicenseResolution,
    ResolutionSource,
    ResolutionStatus,
)


class Verbosity(Enum):
    """Output verbosity levels."""

    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"


class ScanOptions(BaseModel):
    """Options for a scan operation."""

    model_config = {"extra": "forbid"}

    format: Literal["terminal", "json"] = Field(
        default="terminal",
        description="Output format for scan results",
    )
    verbosity: Verbosity = Field(
        default=Verbosity.NORMAL,
        description="Output verbosity level (quiet, normal, verbose)",
    )


class ResolvedDependency(BaseModel):
    """License text resolved for a single dependency."""

    model_config = {"extra": "forbid"}

    name: str = Field(description="Dependency display name")
    status: ResolutionStatus = Field(description="Resolution outcome")
    source: Optional[ResolutionSource] = Field(
        default=None, description="Strategy that produced the text"
    )
    text: Optional[str] = Field(default=None, description="Normalized license text")

    @property
    def resolved(self) -> bool:
        """True if license text was found."""
        return self.status == ResolutionStatus.FOUND

    @classmethod
    def from_resolution(
        cls, name: str, resolution: LicenseResolution
    ) -> ResolvedDependency:
        """Create from the result of LicenseService.resolve()."""
        return cls(
            name=name,
            status=resolution.status,
            source=resolution.source if resolution.found else None,
            text=resolution.text,
        )


class ScanResult(BaseModel):
    """Result of resolving license text for a set of dependencies."""

    model_config = {"extra": "forbid"}

    packages: list[ResolvedDependency] = Field(
        default_factory=list,
        description="Dependencies with their resolved license text",
    )
    total_packages: int = Field(default=0, description="Total dependencies scanned")
    unresolved_count: int = Field(
        default=0, description="Dependencies without license text"
    )

    @property
    def has_unresolved(self) -> bool:
        """Check if any dependency is left without license text."""
        return self.unresolved_count > 0

    @classmethod
    def from_resolved(cls, packages: list[ResolvedDependency]) -> ScanResult:
        """Create ScanResult from resolved dependencies.

        Args:
            packages: Dependencies with resolution outcomes.

        Returns:
            ScanResult with calculated totals.
        """
        unresolved = sum(1 for pkg in packages if not pkg.resolved)
        return cls(
            packages=packages,
            total_packages=len(packages),
            unresolved_count=unresolved,
        )
