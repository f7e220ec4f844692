"""Validation pipeline: runs every package check in pipeline order."""

from __future__ import annotations

import logging

from elpcheck.archive import DEFAULT_MAX_ENTRY_BYTES, Archive, ArchiveSource, ZipArchive
from elpcheck.errors import (
    ArchiveReadError,
    MalformedArchive,
    MalformedDocument,
    ManifestNotFound,
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
    PackageMetadata,
    ValidationReport,
)
from elpcheck.validator.resources import extract_resource_paths, find_missing_resources
from elpcheck.validator.structure import (
    check_nav_structures,
    check_page_presence,
    check_root_element,
    validate_structural_integrity,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_MISSING_LISTED = 5
RESOURCE_FOLDERS = ("content", "custom")

LEGACY_SKIPPED_CHECKS = (
    CheckName.root_element,
    CheckName.nav_structures,
    CheckName.pages,
    CheckName.structure,
)


def _ok(message: str) -> CheckResult:
    return CheckResult(status=CheckStatus.success, message=message)


def _warn(message: str) -> CheckResult:
    return CheckResult(status=CheckStatus.warning, message=message)


def _error(message: str) -> CheckResult:
    return CheckResult(status=CheckStatus.error, message=message)


def _skipped(location: ManifestLocation) -> CheckResult:
    return _warn(f"Skipped: not applicable to legacy {location.entry_name} manifests.")


def check_resource_folders(archive: Archive) -> CheckResult:
    """Report which of the recommended resource folders the archive contains."""
    names = archive.entry_names()
    found = [
        f"{folder}/ directory detected"
        for folder in RESOURCE_FOLDERS
        if any(name.startswith(folder + "/") for name in names)
    ]
    if not found:
        return _warn("Recommended resource folders were not found.")
    return _ok(" • ".join(found))


def _metadata_result(metadata: PackageMetadata) -> CheckResult:
    props = len(metadata.properties)
    res = len(metadata.resources)
    return _ok(
        f"Extracted {props} propert{'y' if props == 1 else 'ies'} "
        f"and {res} resource{'' if res == 1 else 's'}."
    )


def _resources_result(
    found: int, missing: list[str], max_missing_listed: int,
) -> CheckResult:
    if missing:
        listed = ", ".join(missing[:max_missing_listed])
        more = ", …" if len(missing) > max_missing_listed else ""
        return _warn(f"The following resources could not be found: {listed}{more}")
    if found == 0:
        return _ok("No linked resources were detected.")
    if found == 1:
        return _ok("All 1 linked resource is present.")
    return _ok(f"All {found} linked resources are present.")


def _load_document(
    report: ValidationReport, archive: Archive, location: ManifestLocation,
) -> ManifestDocument | None:
    try:
        text = archive.read_text(location.entry_name)
    except ArchiveReadError as e:
        logger.warning("Manifest unreadable: %s", e)
        report.record(
            CheckName.well_formed,
            _error(f"Unable to read {location.entry_name} from the archive."),
            FailureKind.manifest_unreadable,
        )
        return None

    try:
        doc = parse_manifest(text)
    except MalformedDocument as e:
        logger.warning("Manifest %s is not well-formed: %s", location.entry_name, e)
        report.record(CheckName.well_formed, _error(str(e)), FailureKind.malformed_document)
        return None

    report.record(CheckName.well_formed, _ok(f"{location.entry_name} is well-formed."))
    return doc


def _run_legacy(
    report: ValidationReport, doc: ManifestDocument, location: ManifestLocation,
) -> None:
    for name in LEGACY_SKIPPED_CHECKS:
        report.record(name, _skipped(location), FailureKind.skipped)

    raw = extract_legacy_metadata(doc)
    metadata = normalize_legacy_metadata(raw)
    report.metadata = metadata
    if raw:
        report.record(CheckName.metadata, _metadata_result(metadata))
    else:
        report.record(
            CheckName.metadata,
            _warn(f"No package metadata could be read from {location.entry_name}."),
            FailureKind.metadata_unreadable,
        )

    report.record(CheckName.resources, _skipped(location), FailureKind.skipped)


def _record_fatal(
    report: ValidationReport, name: CheckName, result: CheckResult,
) -> bool:
    """Record a check whose failure stops the pipeline; True when it failed."""
    kind = FailureKind.missing_required_element if result.failed else None
    report.record(name, result, kind)
    return result.failed


def _run_modern(
    report: ValidationReport,
    doc: ManifestDocument,
    archive: Archive,
    max_missing_listed: int,
) -> None:
    if _record_fatal(report, CheckName.root_element, check_root_element(doc)):
        logger.warning("Stopping: unexpected manifest root <%s>", doc.root_tag)
        return

    if _record_fatal(report, CheckName.nav_structures, check_nav_structures(doc)):
        logger.warning("Stopping: manifest has no navigation structures")
        return

    pages = check_page_presence(doc)
    report.record(
        CheckName.pages, pages,
        FailureKind.empty_project if pages.status == CheckStatus.warning else None,
    )

    structure = validate_structural_integrity(doc)
    report.record(
        CheckName.structure, structure,
        FailureKind.structural_field_missing if structure.failed else None,
    )

    metadata = extract_metadata(doc)
    report.metadata = metadata
    report.record(CheckName.metadata, _metadata_result(metadata))

    paths = extract_resource_paths(doc)
    report.resource_paths = [p.raw for p in paths]
    missing = find_missing_resources(paths, archive)
    report.missing_resources = missing
    report.record(
        CheckName.resources,
        _resources_result(len(paths), missing, max_missing_listed),
        FailureKind.resource_missing if missing else None,
    )


def validate_archive(
    archive: Archive,
    max_missing_listed: int = DEFAULT_MAX_MISSING_LISTED,
) -> ValidationReport:
    """Run the full pipeline on an opened archive.

    Order: manifest → resource folders → well-formedness → root element →
    navigation → pages → structure → metadata → resources. A fatal failure
    ends the report; the checks after it are not reported at all.
    """
    report = ValidationReport()
    report.record(CheckName.archive, _ok("The archive was loaded successfully."))

    try:
        location = classify_manifest(archive)
    except ManifestNotFound as e:
        logger.warning("Stopping: %s", e)
        report.record(CheckName.manifest, _error(str(e)), FailureKind.manifest_not_found)
        return report

    report.variant = location.variant
    report.manifest_entry = location.entry_name
    if location.variant == ManifestVariant.legacy:
        report.record(
            CheckName.manifest,
            _ok(f"Found {location.entry_name} in the package (legacy format)."),
        )
    else:
        report.record(CheckName.manifest, _ok(f"Found {location.entry_name} in the package."))

    report.record(CheckName.resource_folders, check_resource_folders(archive))

    doc = _load_document(report, archive, location)
    if doc is None:
        return report

    if location.variant == ManifestVariant.legacy:
        _run_legacy(report, doc, location)
    else:
        _run_modern(report, doc, archive, max_missing_listed)
    return report


def validate_package(
    source: ArchiveSource,
    max_missing_listed: int = DEFAULT_MAX_MISSING_LISTED,
    max_entry_bytes: int = DEFAULT_MAX_ENTRY_BYTES,
) -> ValidationReport:
    """Open ``source`` as a ZIP package and validate it.

    Manifest entries larger than ``max_entry_bytes`` once decompressed are
    reported as unreadable instead of being inflated.
    """
    try:
        archive = ZipArchive.open(source, max_entry_bytes)
    except MalformedArchive as e:
        logger.warning("Not a ZIP archive: %s", e)
        report = ValidationReport()
        report.record(
            CheckName.archive,
            _error("The file is not a valid ZIP archive or is corrupted."),
            FailureKind.malformed_archive,
        )
        return report

    with archive:
        return validate_archive(archive, max_missing_listed)
