"""Validation engine for eXeLearning (.elp) packages."""

from elpcheck.errors import (
    ArchiveReadError,
    MalformedArchive,
    MalformedDocument,
    ManifestNotFound,
    PackageValidationError,
)
from elpcheck.validator.classifier import classify_manifest
from elpcheck.validator.document import ManifestDocument, parse_manifest
from elpcheck.validator.legacy import extract_legacy_metadata, normalize_legacy_metadata
from elpcheck.validator.metadata import extract_metadata
from elpcheck.validator.models import (
    CheckName,
    CheckResult,
    CheckStatus,
    FailureKind,
    ManifestLocation,
    ManifestVariant,
    NamedCheck,
    PackageMetadata,
    ResourcePath,
    ValidationReport,
)
from elpcheck.validator.pipeline import validate_archive, validate_package
from elpcheck.validator.resources import (
    extract_resource_paths,
    find_missing_resources,
    normalize_resource_path,
)
from elpcheck.validator.structure import (
    check_nav_structures,
    check_page_presence,
    check_root_element,
    validate_structural_integrity,
)

__all__ = [
    "ArchiveReadError",
    "CheckName",
    "CheckResult",
    "CheckStatus",
    "FailureKind",
    "MalformedArchive",
    "MalformedDocument",
    "ManifestDocument",
    "ManifestLocation",
    "ManifestNotFound",
    "ManifestVariant",
    "NamedCheck",
    "PackageMetadata",
    "PackageValidationError",
    "ResourcePath",
    "ValidationReport",
    "check_nav_structures",
    "check_page_presence",
    "check_root_element",
    "classify_manifest",
    "extract_legacy_metadata",
    "extract_metadata",
    "extract_resource_paths",
    "find_missing_resources",
    "normalize_legacy_metadata",
    "normalize_resource_path",
    "parse_manifest",
    "validate_archive",
    "validate_package",
    "validate_structural_integrity",
]
