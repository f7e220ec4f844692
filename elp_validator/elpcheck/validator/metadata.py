"""Key/value metadata from modern manifests (<odeProperty>, <odeResource>)."""

from __future__ import annotations

from elpcheck.validator.document import ManifestDocument, first_descendant, text_of
from elpcheck.validator.models import PackageMetadata

PROPERTY_TAG = "odeProperty"
RESOURCE_TAG = "odeResource"


def _collect_pairs(doc: ManifestDocument, tag: str) -> dict[str, str]:
    """Read key/value children of every ``tag`` element; later keys overwrite."""
    pairs: dict[str, str] = {}
    for node in doc.find_all(tag):
        key = text_of(first_descendant(node, "key")).strip()
        if not key:
            continue
        pairs[key] = text_of(first_descendant(node, "value")).strip()
    return pairs


def extract_metadata(doc: ManifestDocument) -> PackageMetadata:
    return PackageMetadata(
        properties=_collect_pairs(doc, PROPERTY_TAG),
        resources=_collect_pairs(doc, RESOURCE_TAG),
    )
