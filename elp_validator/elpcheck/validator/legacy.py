"""Metadata from legacy (contentv3.xml) manifests.

Legacy packages store the project as a serialized object graph::

    <instance class="exe.engine.package.Package">
      <dictionary>
        <string role="key" value="_title"/>
        <unicode value="My project"/>
        <string role="key" value="dublinCore"/>
        <instance class="exe.engine.package.DublinCore">
          <dictionary>...</dictionary>
        </instance>
        ...

Only scalar values of the package dictionary and of its Dublin Core record
are read. Everything else (nodes, idevices, references) is ignored.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from elpcheck.validator.document import ManifestDocument, local_name
from elpcheck.validator.models import PackageMetadata

logger = logging.getLogger(__name__)

SCALAR_TAGS = {"unicode", "string", "int", "bool", "float", "long"}
DUBLIN_CORE_KEY = "dublinCore"
DUBLIN_CORE_PREFIX = "dc_"

# Modern key -> legacy keys, first non-empty wins.
LEGACY_PROPERTY_MAP: dict[str, tuple[str, ...]] = {
    "pp_title": ("_title", "dc_title"),
    "pp_author": ("_author", "dc_creator"),
    "pp_description": ("_description", "dc_description"),
    "pp_lang": ("_lang", "dc_language"),
    "pp_subject": ("dc_subject",),
    "pp_publisher": ("dc_publisher",),
    "pp_rights": ("dc_rights",),
    "license": ("license",),
    "footer": ("footer",),
}
LEGACY_RESOURCE_MAP: dict[str, tuple[str, ...]] = {
    "odeName": ("_name",),
}


def _child_elements(element: Any) -> Iterator[Any]:
    for child in element:
        if local_name(child):
            yield child


def _find_dictionary(instance: Any) -> Any | None:
    for child in _child_elements(instance):
        if local_name(child) == "dictionary":
            return child
    return None


def _scalar_value(element: Any) -> str | None:
    """String form of a scalar value element, or None for compound values."""
    tag = local_name(element)
    if tag == "none":
        return ""
    if tag not in SCALAR_TAGS:
        return None
    value = element.get("value")
    if value is None:
        value = element.text or ""
    return value.strip()


def _read_dictionary(dictionary: Any, prefix: str = "") -> dict[str, str]:
    pairs: dict[str, str] = {}
    children = list(_child_elements(dictionary))
    for i, child in enumerate(children):
        if child.get("role") != "key" or i + 1 >= len(children):
            continue
        key = (child.get("value") or "").strip()
        if not key:
            continue
        value_node = children[i + 1]

        if key == DUBLIN_CORE_KEY and not prefix and local_name(value_node) == "instance":
            nested = _find_dictionary(value_node)
            if nested is not None:
                pairs.update(_read_dictionary(nested, DUBLIN_CORE_PREFIX))
            continue

        value = _scalar_value(value_node)
        if value is not None:
            pairs[prefix + key] = value
    return pairs


def extract_legacy_metadata(doc: ManifestDocument) -> dict[str, str]:
    """Raw scalar key/value pairs of the legacy package record."""
    root = doc.root
    if local_name(root) != "instance":
        logger.debug("Legacy manifest root is <%s>, not <instance>", local_name(root))
        return {}
    dictionary = _find_dictionary(root)
    if dictionary is None:
        return {}
    return _read_dictionary(dictionary)


def _map_fields(raw: dict[str, str], mapping: dict[str, tuple[str, ...]]) -> dict[str, str]:
    mapped: dict[str, str] = {}
    for modern_key, legacy_keys in mapping.items():
        for legacy_key in legacy_keys:
            if raw.get(legacy_key):
                mapped[modern_key] = raw[legacy_key]
                break
    return mapped


def normalize_legacy_metadata(raw: dict[str, str]) -> PackageMetadata:
    """Map legacy field names onto the modern properties/resources shape."""
    return PackageMetadata(
        properties=_map_fields(raw, LEGACY_PROPERTY_MAP),
        resources=_map_fields(raw, LEGACY_RESOURCE_MAP),
    )
