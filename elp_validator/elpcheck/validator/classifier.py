"""Locate the manifest inside a package and tell which schema it uses."""

from __future__ import annotations

import logging

from elpcheck.archive import Archive
from elpcheck.errors import ManifestNotFound
from elpcheck.validator.models import ManifestLocation, ManifestVariant

logger = logging.getLogger(__name__)

MODERN_MANIFEST = "content.xml"
LEGACY_MANIFEST = "contentv3.xml"


def classify_manifest(archive: Archive) -> ManifestLocation:
    """Pick the manifest entry; the modern one wins when both are present."""
    if archive.has_entry(MODERN_MANIFEST):
        location = ManifestLocation(entry_name=MODERN_MANIFEST, variant=ManifestVariant.modern)
    elif archive.has_entry(LEGACY_MANIFEST):
        location = ManifestLocation(entry_name=LEGACY_MANIFEST, variant=ManifestVariant.legacy)
    else:
        raise ManifestNotFound(f"{MODERN_MANIFEST} was not found in the archive.")

    logger.debug("Manifest %s (%s)", location.entry_name, location.variant.value)
    return location
