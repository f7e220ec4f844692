"""Resource reference extraction and cross-check against the archive."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterable
from urllib.parse import quote, unquote

from elpcheck.archive import Archive
from elpcheck.validator.document import ManifestDocument, text_of
from elpcheck.validator.models import ResourcePath

logger = logging.getLogger(__name__)

MARKUP_TAG = "htmlView"
STRUCTURED_TAG = "jsonProperties"

ATTRIBUTE_RE = re.compile(r"""(?:src|href)=["']([^"']+)["']""", re.IGNORECASE)
RESOURCE_FOLDER_RE = re.compile(r"(content|custom)/", re.IGNORECASE)

# Characters encodeURI() leaves alone besides alphanumerics and "-_.~".
_URI_SAFE = ";,/?:@&=+$!*'()#"


def _normalize_once(path: str) -> str:
    value = unquote(path.strip())
    if value.startswith("./"):
        value = value[2:]
    if value.startswith("/"):
        value = value[1:]
    return value.replace("\\", "/")


def normalize_resource_path(path: str) -> str:
    """Turn a manifest reference into an archive entry name.

    Percent-decodes, drops a leading ``./`` and ``/`` and converts
    backslashes. Repeats until stable, so normalizing twice is a no-op.
    """
    current = path
    while True:
        normalized = _normalize_once(current)
        if normalized == current:
            return normalized
        current = normalized


def is_resource_reference(value: str) -> bool:
    return RESOURCE_FOLDER_RE.search(value) is not None


class _PathCollector:
    """Accumulates references, deduplicated by normalized path."""

    def __init__(self) -> None:
        self._paths: dict[str, ResourcePath] = {}

    def add(self, raw: str) -> None:
        normalized = normalize_resource_path(raw)
        if normalized not in self._paths:
            self._paths[normalized] = ResourcePath(raw=raw, normalized=normalized)

    def scan_attributes(self, text: str) -> None:
        for match in ATTRIBUTE_RE.finditer(text):
            value = match.group(1)
            if is_resource_reference(value):
                self.add(value)

    def walk_json(self, value: Any) -> None:
        if isinstance(value, str):
            if is_resource_reference(value):
                self.add(value)
        elif isinstance(value, dict):
            for item in value.values():
                self.walk_json(item)
        elif isinstance(value, list):
            for item in value:
                self.walk_json(item)

    @property
    def paths(self) -> list[ResourcePath]:
        return list(self._paths.values())


def extract_resource_paths(doc: ManifestDocument) -> list[ResourcePath]:
    """Collect resource references from component markup and JSON properties."""
    collector = _PathCollector()

    for node in doc.find_all(MARKUP_TAG):
        collector.scan_attributes(text_of(node))

    for node in doc.find_all(STRUCTURED_TAG):
        text = text_of(node)
        try:
            parsed = json.loads(text)
        except ValueError:
            # Templated properties ({{...}} placeholders) are not valid JSON;
            # fall back to the same attribute scan used for markup.
            collector.scan_attributes(text)
            continue
        collector.walk_json(parsed)

    paths = collector.paths
    logger.debug("Extracted %d resource reference(s)", len(paths))
    return paths


def find_missing_resources(
    paths: Iterable[str | ResourcePath],
    archive: Archive,
) -> list[str]:
    """Return the raw references that have no matching archive entry.

    Each reference is looked up by its normalized name, then by the
    URI-encoded form of that name.
    """
    missing: list[str] = []
    for path in paths:
        raw = path.raw if isinstance(path, ResourcePath) else path
        normalized = normalize_resource_path(raw)
        if archive.has_entry(normalized):
            continue
        if archive.has_entry(quote(normalized, safe=_URI_SAFE)):
            continue
        missing.append(raw)
    return missing
