"""Structural checks for modern (content.xml) manifests."""

from __future__ import annotations

from typing import Any, Union

from elpcheck.validator.document import ManifestDocument, descendants, first_descendant
from elpcheck.validator.models import CheckResult, CheckStatus

ROOT_TAG = "ode"
NAV_CONTAINER_TAG = "odeNavStructures"
PAGE_TAG = "odeNavStructure"
BLOCK_TAG = "odePagStructure"
COMPONENT_TAG = "odeComponent"

# A requirement is a tag name, or a tuple of alternatives where any one suffices.
Requirement = Union[str, tuple[str, ...]]

REQUIRED_PAGE_FIELDS: list[Requirement] = [
    "odePageId",
    "pageName",
    ("odeNavStructureSyncOrder", "odeNavStructureOrder"),
]
REQUIRED_BLOCK_FIELDS: list[Requirement] = ["odeBlockId", "blockName"]
REQUIRED_COMPONENT_FIELDS: list[Requirement] = [
    "odeIdeviceId",
    "odeIdeviceTypeName",
    "htmlView",
    "jsonProperties",
]


def check_root_element(doc: ManifestDocument | None) -> CheckResult:
    """The root element must be <ode> (case-insensitive)."""
    if doc is None or doc.root is None:
        return CheckResult(status=CheckStatus.error, message="Unable to read the XML root element.")

    tag = doc.root_tag
    if not tag:
        return CheckResult(
            status=CheckStatus.error, message="The XML root element is missing a tag name."
        )

    if tag.lower() != ROOT_TAG:
        return CheckResult(
            status=CheckStatus.error,
            message=f"Expected the root element to be <{ROOT_TAG}>, found <{tag}> instead.",
        )

    return CheckResult(status=CheckStatus.success, message=f"The root element is <{ROOT_TAG}>.")


def check_nav_structures(doc: ManifestDocument) -> CheckResult:
    if not doc.find_all(NAV_CONTAINER_TAG):
        return CheckResult(
            status=CheckStatus.error, message=f"The <{NAV_CONTAINER_TAG}> element is missing."
        )
    return CheckResult(status=CheckStatus.success, message="Navigation structures found.")


def check_page_presence(doc: ManifestDocument) -> CheckResult:
    """Count pages; an empty project is a warning, not an error."""
    pages = doc.count(PAGE_TAG)
    if pages == 0:
        return CheckResult(
            status=CheckStatus.warning,
            message=f"No <{PAGE_TAG}> entries were found. The project appears to be empty.",
        )
    return CheckResult(
        status=CheckStatus.success,
        message=f"Found {pages} page{'' if pages == 1 else 's'}.",
    )


def _format_requirement(requirement: Requirement) -> str:
    if isinstance(requirement, tuple):
        return " / ".join(requirement)
    return requirement


def _missing_fields(node: Any, required: list[Requirement]) -> list[str]:
    """Requirements with no matching tag anywhere below ``node``."""
    missing: list[str] = []
    for requirement in required:
        tags = requirement if isinstance(requirement, tuple) else (requirement,)
        if not any(first_descendant(node, tag) is not None for tag in tags):
            missing.append(_format_requirement(requirement))
    return missing


def _check_components(block: Any, block_no: int, page_no: int) -> list[str]:
    issues: list[str] = []
    for comp_no, component in enumerate(descendants(block, COMPONENT_TAG), start=1):
        missing = _missing_fields(component, REQUIRED_COMPONENT_FIELDS)
        if missing:
            issues.append(
                f"Component #{comp_no} in block #{block_no} of page #{page_no} "
                f"is missing fields: {', '.join(missing)}"
            )
    return issues


def _check_blocks(page: Any, page_no: int) -> list[str]:
    issues: list[str] = []
    for block_no, block in enumerate(descendants(page, BLOCK_TAG), start=1):
        missing = _missing_fields(block, REQUIRED_BLOCK_FIELDS)
        if missing:
            issues.append(
                f"Block #{block_no} in page #{page_no} is missing fields: {', '.join(missing)}"
            )
        issues.extend(_check_components(block, block_no, page_no))
    return issues


def validate_structural_integrity(doc: ManifestDocument) -> CheckResult:
    """Check required fields on every page, block and component.

    All issues across the tree are collected into one message; indices are
    1-based and follow document order.
    """
    issues: list[str] = []
    for page_no, page in enumerate(doc.find_all(PAGE_TAG), start=1):
        missing = _missing_fields(page, REQUIRED_PAGE_FIELDS)
        if missing:
            issues.append(
                f"Navigation structure #{page_no} is missing fields: {', '.join(missing)}"
            )
        issues.extend(_check_blocks(page, page_no))

    if issues:
        return CheckResult(status=CheckStatus.error, message=" ".join(issues))

    return CheckResult(
        status=CheckStatus.success,
        message="The internal XML structure matches the expected layout.",
    )
