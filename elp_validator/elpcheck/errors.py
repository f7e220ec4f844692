"""Exceptions raised by the package validation engine."""

from __future__ import annotations


class PackageValidationError(Exception):
    """Base class for failures that stop package validation."""


class MalformedArchive(PackageValidationError):
    """The container cannot be opened as a ZIP archive."""


class ArchiveReadError(PackageValidationError):
    """An archive entry is absent or cannot be decoded as text."""

    def __init__(self, entry_name: str, reason: str) -> None:
        super().__init__(f"Cannot read '{entry_name}': {reason}")
        self.entry_name = entry_name
        self.reason = reason


class ManifestNotFound(PackageValidationError):
    """Neither the modern nor the legacy manifest entry exists."""


class MalformedDocument(PackageValidationError):
    """The manifest text is not well-formed XML.

    ``str(exc)`` is the parser diagnostic, unchanged.
    """
