"""Shared test fixtures and configuration."""

import io
import sys
import zipfile
from pathlib import Path
from typing import Callable

# Add elp_validator/ to Python path so `from elpcheck.xxx` imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "elp_validator"))

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def content_xml(fixtures_dir: Path) -> str:
    return (fixtures_dir / "content.xml").read_text(encoding="utf-8")


@pytest.fixture
def legacy_xml(fixtures_dir: Path) -> str:
    return (fixtures_dir / "contentv3.xml").read_text(encoding="utf-8")


def build_zip(entries: dict[str, bytes | str]) -> bytes:
    """Zip ``entries`` in memory and return the archive bytes."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return buf.getvalue()


@pytest.fixture
def make_zip() -> Callable[[dict[str, bytes | str]], bytes]:
    return build_zip
