"""Resolution result models.

"Found nothing" is an ordinary outcome of every strategy and is carried as a
value, not raised.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class ResolutionStatus(Enum):
    """Outcome of one strategy or of a whole resolution."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class ResolutionSource(Enum):
    """Where license text came from, in chain order."""

    CACHE = "cache"
    LICENSE_RELATIVE_PATH = "license_relative_path"
    LICENSE_URL = "license_url"
    REPOSITORY_URL = "repository_url"
    PROJECT_URL = "project_url"
    PACKAGE_PATH = "package_path"
    SOURCE_PATH = "source_path"
    VERSION_INFO = "version_info"
    FINAL_LICENSE_URL = "final_license_url"
    FINAL_REPOSITORY_URL = "final_repository_url"
    FINAL_PROJECT_URL = "final_project_url"


class LicenseResolution(BaseModel):
    """Result of resolving license text."""

    model_config = {"extra": "forbid", "frozen": True}

    status: ResolutionStatus = Field(description="Outcome")
    text: Optional[str] = Field(default=None, description="Normalized license text")
    source: Optional[ResolutionSource] = Field(
        default=None, description="Strategy that produced the text"
    )
    key: Optional[str] = Field(
        default=None, description="Path or URL the strategy consulted"
    )
    error: Optional[str] = Field(
        default=None, description="Diagnostic message for failed strategies"
    )

    @model_validator(mode="after")
    def _text_matches_status(self) -> LicenseResolution:
        if self.status == ResolutionStatus.FOUND and not self.text:
            raise ValueError("a found resolution must carry license text")
        if self.status != ResolutionStatus.FOUND and self.text is not None:
            raise ValueError("only a found resolution may carry license text")
        return self

    @property
    def found(self) -> bool:
        """True if license text was resolved."""
        return self.status == ResolutionStatus.FOUND

    @classmethod
    def found_text(
        cls,
        text: str,
        source: ResolutionSource,
        key: Optional[str] = None,
    ) -> LicenseResolution:
        """Build a FOUND result."""
        return cls(status=ResolutionStatus.FOUND, text=text, source=source, key=key)

    @classmethod
    def not_found(
        cls,
        source: Optional[ResolutionSource] = None,
        key: Optional[str] = None,
    ) -> LicenseResolution:
        """Build a NOT_FOUND result."""
        return cls(status=ResolutionStatus.NOT_FOUND, source=source, key=key)

    @classmethod
    def failed(
        cls,
        source: ResolutionSource,
        key: Optional[str],
        error: BaseException,
    ) -> LicenseResolution:
        """Build a FAILED result from the exception a strategy raised."""
        return cls(
            status=ResolutionStatus.FAILED,
            source=source,
            key=key,
            error=f"{type(error).__name__}: {error}",
        )
