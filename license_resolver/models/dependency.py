"""Dependency input models for license-resolver.

A DependencyRecord carries the already-extracted facts about one package or
binary. Every field is optional; the resolution chain uses whatever subset
is present.
"""

from typing import Optional

from pydantic import BaseModel, Field


class PackageMetadata(BaseModel):
    """Fields extracted from a package manifest."""

    model_config = {"extra": "forbid", "frozen": True}

    id: Optional[str] = Field(
        default=None, min_length=1, description="Package identifier"
    )
    license_url: Optional[str] = Field(
        default=None, description="License URL declared by the package"
    )
    project_url: Optional[str] = Field(
        default=None, description="Project home page URL"
    )
    repository_url: Optional[str] = Field(
        default=None, description="Source repository URL"
    )
    license_relative_path: Optional[str] = Field(
        default=None,
        description="License file path relative to the package directory",
    )


class VersionInfo(BaseModel):
    """Version resource metadata read from a compiled binary."""

    model_config = {"extra": "forbid", "frozen": True}

    file_name: str = Field(min_length=1, description="Path of the binary")
    product_name: Optional[str] = Field(default=None, description="ProductName")
    company_name: Optional[str] = Field(default=None, description="CompanyName")
    file_description: Optional[str] = Field(
        default=None, description="FileDescription"
    )
    file_version: Optional[str] = Field(default=None, description="FileVersion")
    product_version: Optional[str] = Field(
        default=None, description="ProductVersion"
    )
    legal_copyright: Optional[str] = Field(
        default=None, description="LegalCopyright"
    )


class DependencyRecord(BaseModel):
    """Everything known about one dependency whose license text is wanted."""

    model_config = {"extra": "forbid", "frozen": True}

    package: Optional[PackageMetadata] = Field(
        default=None, description="Package manifest fields"
    )
    package_path: Optional[str] = Field(
        default=None, description="On-disk package directory"
    )
    source_path: Optional[str] = Field(
        default=None, description="On-disk file the dependency was found as"
    )
    version_info: Optional[VersionInfo] = Field(
        default=None, description="Binary version metadata"
    )

    @property
    def package_id(self) -> Optional[str]:
        """Package identifier, if package metadata is present."""
        return self.package.id if self.package is not None else None

    @property
    def display_name(self) -> str:
        """Best human-readable name for reports and log messages."""
        if self.package is not None and self.package.id:
            return self.package.id
        if self.version_info is not None:
            return self.version_info.file_name
        path = self.source_path or self.package_path
        if path:
            return path
        if self.package is not None:
            return (
                self.package.license_url
                or self.package.repository_url
                or self.package.project_url
                or "<unknown>"
            )
        return "<unknown>"
