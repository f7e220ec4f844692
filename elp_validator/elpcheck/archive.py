"""Read-only views over package containers."""

from __future__ import annotations

import io
import logging
import zipfile
import zlib
from pathlib import Path
from typing import BinaryIO, Mapping, Protocol, Union

from elpcheck.errors import ArchiveReadError, MalformedArchive

logger = logging.getLogger(__name__)

ArchiveSource = Union[str, Path, bytes, BinaryIO]

DEFAULT_MAX_ENTRY_BYTES = 50 * 1024 * 1024


class Archive(Protocol):
    """What the validation engine needs from a package container."""

    def entry_names(self) -> set[str]: ...

    def has_entry(self, name: str) -> bool: ...

    def read_text(self, name: str) -> str: ...


def _decode(name: str, data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ArchiveReadError(name, f"not valid UTF-8 text ({e.reason})") from e


class ZipArchive:
    """Archive backed by a ZIP file.

    Entry names are indexed once on construction; the underlying file stays
    open until :meth:`close` (or the end of a ``with`` block). Entries whose
    uncompressed size exceeds ``max_entry_bytes`` are refused by :meth:`read_text`.
    """

    def __init__(
        self, zf: zipfile.ZipFile, max_entry_bytes: int = DEFAULT_MAX_ENTRY_BYTES,
    ) -> None:
        self._zf = zf
        self._max_entry_bytes = max_entry_bytes
        self._names = set(zf.namelist())
        self._files = {n for n in self._names if not n.endswith("/")}

    @classmethod
    def open(
        cls, source: ArchiveSource, max_entry_bytes: int = DEFAULT_MAX_ENTRY_BYTES,
    ) -> ZipArchive:
        """Open ``source`` (path, raw bytes or binary stream) as a ZIP archive."""
        if isinstance(source, bytes):
            source = io.BytesIO(source)
        try:
            zf = zipfile.ZipFile(source, "r")
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, EOFError) as e:
            raise MalformedArchive(str(e)) from e
        logger.debug("Opened archive with %d entries", len(zf.namelist()))
        return cls(zf, max_entry_bytes)

    def entry_names(self) -> set[str]:
        return set(self._names)

    def has_entry(self, name: str) -> bool:
        return name in self._files

    def read_text(self, name: str) -> str:
        if name not in self._files:
            raise ArchiveReadError(name, "no such entry")
        size = self._zf.getinfo(name).file_size
        if size > self._max_entry_bytes:
            raise ArchiveReadError(
                name, f"uncompressed size {size} exceeds limit of {self._max_entry_bytes} bytes"
            )
        try:
            data = self._zf.read(name)
        except (
            zipfile.BadZipFile, zlib.error, NotImplementedError, OSError, EOFError, RuntimeError,
        ) as e:
            raise ArchiveReadError(name, str(e)) from e
        return _decode(name, data)

    def close(self) -> None:
        self._zf.close()

    def __enter__(self) -> ZipArchive:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class MemoryArchive:
    """Archive over entries that are already in memory."""

    def __init__(self, entries: Mapping[str, bytes | str]) -> None:
        self._entries = {
            name: data.encode("utf-8") if isinstance(data, str) else data
            for name, data in entries.items()
        }

    def entry_names(self) -> set[str]:
        return set(self._entries)

    def has_entry(self, name: str) -> bool:
        return name in self._entries and not name.endswith("/")

    def read_text(self, name: str) -> str:
        if not self.has_entry(name):
            raise ArchiveReadError(name, "no such entry")
        return _decode(name, self._entries[name])
