"""Tests for the full validation pipeline."""

from __future__ import annotations

import struct
from typing import Callable

from elpcheck.archive import MemoryArchive
from elpcheck.validator.models import (
    CheckName,
    CheckStatus,
    FailureKind,
    ManifestVariant,
)
from elpcheck.validator.pipeline import validate_archive, validate_package

MakeZip = Callable[[dict], bytes]


def _names(report) -> list[CheckName]:
    return [c.name for c in report.checks]


def test_minimal_package_is_all_success(content_xml: str, make_zip: MakeZip) -> None:
    data = make_zip({"content.xml": content_xml, "content/images/pic.png": b"\x89PNG"})
    report = validate_package(data)

    assert _names(report) == list(CheckName)
    assert all(c.status == CheckStatus.success for c in report.checks)
    assert report.valid is True
    assert report.variant == ManifestVariant.modern
    assert report.check(CheckName.resources).message == "All 1 linked resource is present."
    assert report.check(CheckName.pages).message == "Found 1 page."
    assert report.resource_paths == ["content/images/pic.png"]
    assert report.missing_resources == []
    assert report.metadata.properties["pp_title"] == "Start here"


def test_resource_folders_message(content_xml: str) -> None:
    archive = MemoryArchive({
        "content.xml": content_xml,
        "content/images/pic.png": b"",
        "custom/style.css": b"",
    })
    result = validate_archive(archive).check(CheckName.resource_folders)
    assert result.status == CheckStatus.success
    assert result.message == "content/ directory detected • custom/ directory detected"


def test_missing_resource_folders_is_warning() -> None:
    xml = "<ode><odeNavStructures/></ode>"
    report = validate_archive(MemoryArchive({"content.xml": xml}))
    assert report.check(CheckName.resource_folders).status == CheckStatus.warning
    assert report.check(CheckName.resources).message == "No linked resources were detected."


def test_legacy_package_skips_structural_checks(legacy_xml: str, make_zip: MakeZip) -> None:
    report = validate_package(make_zip({"contentv3.xml": legacy_xml}))

    assert report.variant == ManifestVariant.legacy
    assert report.manifest_entry == "contentv3.xml"
    assert _names(report) == list(CheckName)
    for name in (
        CheckName.root_element,
        CheckName.nav_structures,
        CheckName.pages,
        CheckName.structure,
        CheckName.resources,
    ):
        check = report.check(name)
        assert check.status == CheckStatus.warning
        assert check.kind == FailureKind.skipped
        assert "Skipped" in check.message

    assert report.check(CheckName.metadata).status == CheckStatus.success
    assert report.metadata.properties["pp_title"] == "Mi proyecto"
    assert report.valid is True


def test_legacy_without_metadata_warns() -> None:
    report = validate_archive(MemoryArchive({"contentv3.xml": "<instance/>"}))
    metadata = report.check(CheckName.metadata)
    assert metadata.status == CheckStatus.warning
    assert metadata.kind == FailureKind.metadata_unreadable


def test_modern_manifest_preferred(content_xml: str, legacy_xml: str) -> None:
    archive = MemoryArchive({"content.xml": content_xml, "contentv3.xml": legacy_xml})
    assert validate_archive(archive).variant == ManifestVariant.modern


def test_wrong_root_stops_pipeline() -> None:
    report = validate_archive(MemoryArchive({"content.xml": "<root></root>"}))
    assert report.checks[-1].name == CheckName.root_element
    assert report.checks[-1].status == CheckStatus.error
    assert report.checks[-1].kind == FailureKind.missing_required_element
    assert "<root>" in report.checks[-1].message
    assert report.check(CheckName.nav_structures) is None
    assert report.valid is False


def test_missing_nav_structures_stops_pipeline() -> None:
    report = validate_archive(MemoryArchive({"content.xml": "<ode></ode>"}))
    assert report.checks[-1].name == CheckName.nav_structures
    assert report.checks[-1].status == CheckStatus.error
    assert report.check(CheckName.pages) is None


def test_empty_project_continues() -> None:
    report = validate_archive(MemoryArchive({"content.xml": "<ode><odeNavStructures/></ode>"}))
    pages = report.check(CheckName.pages)
    assert pages.status == CheckStatus.warning
    assert pages.kind == FailureKind.empty_project
    assert _names(report)[-1] == CheckName.resources
    assert report.valid is True


def test_structural_errors_do_not_stop_pipeline() -> None:
    xml = (
        "<ode><odeNavStructures><odeNavStructure><odePageId>p</odePageId>"
        "</odeNavStructure></odeNavStructures></ode>"
    )
    report = validate_archive(MemoryArchive({"content.xml": xml}))
    structure = report.check(CheckName.structure)
    assert structure.status == CheckStatus.error
    assert structure.kind == FailureKind.structural_field_missing
    assert report.check(CheckName.metadata) is not None
    assert report.check(CheckName.resources) is not None
    assert report.valid is False


def test_missing_resources_warning_is_truncated() -> None:
    images = "".join(f'<img src="content/images/{i}.png">' for i in range(7))
    xml = (
        "<ode><odeNavStructures/><odeComponent>"
        f"<htmlView><![CDATA[{images}]]></htmlView></odeComponent></ode>"
    )
    archive = MemoryArchive({"content.xml": xml, "content/images/0.png": b""})
    report = validate_archive(archive, max_missing_listed=5)

    resources = report.check(CheckName.resources)
    assert resources.status == CheckStatus.warning
    assert resources.kind == FailureKind.resource_missing
    assert len(report.missing_resources) == 6
    assert resources.message == (
        "The following resources could not be found: content/images/1.png, "
        "content/images/2.png, content/images/3.png, content/images/4.png, "
        "content/images/5.png, …"
    )
    assert report.valid is True


def test_manifest_not_found() -> None:
    report = validate_archive(MemoryArchive({"content/images/pic.png": b""}))
    assert _names(report) == [CheckName.archive, CheckName.manifest]
    assert report.checks[-1].status == CheckStatus.error
    assert report.checks[-1].kind == FailureKind.manifest_not_found


def test_malformed_manifest_stops_pipeline() -> None:
    report = validate_archive(MemoryArchive({"content.xml": "<ode><unclosed></ode>"}))
    assert report.checks[-1].name == CheckName.well_formed
    assert report.checks[-1].status == CheckStatus.error
    assert report.checks[-1].kind == FailureKind.malformed_document


def test_undecodable_manifest() -> None:
    report = validate_archive(MemoryArchive({"content.xml": b"\xff\xfe<ode/>"}))
    well_formed = report.checks[-1]
    assert well_formed.name == CheckName.well_formed
    assert well_formed.message == "Unable to read content.xml from the archive."
    assert well_formed.kind == FailureKind.manifest_unreadable


def _corrupt_first_entry(data: bytes) -> bytes:
    """Overwrite the start of the first entry's deflate stream with garbage."""
    name_len, extra_len = struct.unpack("<HH", data[26:30])
    start = 30 + name_len + extra_len
    return data[:start] + b"\xff" * 20 + data[start + 20:]


def test_corrupt_deflate_stream_is_unreadable(content_xml: str, make_zip: MakeZip) -> None:
    data = _corrupt_first_entry(make_zip({"content.xml": content_xml}))
    report = validate_package(data)

    well_formed = report.checks[-1]
    assert _names(report)[-1] == CheckName.well_formed
    assert well_formed.status == CheckStatus.error
    assert well_formed.message == "Unable to read content.xml from the archive."
    assert well_formed.kind == FailureKind.manifest_unreadable
    assert report.valid is False


def test_oversized_manifest_is_unreadable(content_xml: str, make_zip: MakeZip) -> None:
    report = validate_package(make_zip({"content.xml": content_xml}), max_entry_bytes=10)

    well_formed = report.checks[-1]
    assert well_formed.name == CheckName.well_formed
    assert well_formed.status == CheckStatus.error
    assert well_formed.kind == FailureKind.manifest_unreadable


def test_not_a_zip() -> None:
    report = validate_package(b"this is not a zip file")
    assert _names(report) == [CheckName.archive]
    assert report.checks[0].status == CheckStatus.error
    assert report.checks[0].kind == FailureKind.malformed_archive
    assert report.valid is False


def test_validate_package_from_path(tmp_path, content_xml: str, make_zip: MakeZip) -> None:
    package = tmp_path / "project.elp"
    package.write_bytes(make_zip({"content.xml": content_xml, "content/images/pic.png": b""}))
    assert validate_package(package).valid is True
