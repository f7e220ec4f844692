"""Validation data models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CheckStatus(str, Enum):
    """Outcome of a single check."""

    success = "success"
    warning = "warning"
    error = "error"


class CheckName(str, Enum):
    """Checks reported by the pipeline, declared in pipeline order."""

    archive = "archive"
    manifest = "manifest"
    resource_folders = "resource_folders"
    well_formed = "well_formed"
    root_element = "root_element"
    nav_structures = "nav_structures"
    pages = "pages"
    structure = "structure"
    metadata = "metadata"
    resources = "resources"


class FailureKind(str, Enum):
    """Why a check did not succeed."""

    malformed_archive = "malformed_archive"
    manifest_not_found = "manifest_not_found"
    malformed_document = "malformed_document"
    manifest_unreadable = "manifest_unreadable"
    missing_required_element = "missing_required_element"
    structural_field_missing = "structural_field_missing"
    metadata_unreadable = "metadata_unreadable"
    resource_missing = "resource_missing"
    empty_project = "empty_project"
    skipped = "skipped"


class ManifestVariant(str, Enum):
    """Manifest schema generation found in the package."""

    modern = "modern"
    legacy = "legacy"


class CheckResult(BaseModel):
    """Status and human-readable message produced by one check."""

    model_config = ConfigDict(frozen=True)

    status: CheckStatus
    message: str

    @property
    def failed(self) -> bool:
        return self.status == CheckStatus.error


class NamedCheck(BaseModel):
    """A check result as it appears in the report."""

    model_config = ConfigDict(frozen=True)

    name: CheckName
    status: CheckStatus
    message: str
    kind: FailureKind | None = None


class ManifestLocation(BaseModel):
    """Archive entry holding the manifest and the schema it follows."""

    model_config = ConfigDict(frozen=True)

    entry_name: str
    variant: ManifestVariant


class PackageMetadata(BaseModel):
    """Descriptive key/value metadata declared by the manifest."""

    properties: dict[str, str] = Field(default_factory=dict)
    resources: dict[str, str] = Field(default_factory=dict)


class ResourcePath(BaseModel):
    """A resource reference as written in the manifest, plus its archive path."""

    model_config = ConfigDict(frozen=True)

    raw: str
    normalized: str


class ValidationReport(BaseModel):
    """Aggregated result from the validation pipeline."""

    checks: list[NamedCheck] = Field(default_factory=list)
    variant: ManifestVariant | None = None
    manifest_entry: str | None = None
    metadata: PackageMetadata | None = None
    resource_paths: list[str] = Field(default_factory=list)
    missing_resources: list[str] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not any(c.status == CheckStatus.error for c in self.checks)

    def check(self, name: CheckName) -> NamedCheck | None:
        """Return the reported check called ``name``, if it ran."""
        for entry in self.checks:
            if entry.name == name:
                return entry
        return None

    def record(
        self,
        name: CheckName,
        result: CheckResult,
        kind: FailureKind | None = None,
    ) -> CheckResult:
        self.checks.append(
            NamedCheck(name=name, status=result.status, message=result.message, kind=kind)
        )
        return result
