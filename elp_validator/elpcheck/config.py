"""Service options: /data/options.json with environment fallback."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class ValidatorSettings(BaseModel):
    """Runtime options for the validation service."""

    max_upload_mb: int = Field(100, gt=0, description="Largest accepted upload, in MiB")
    max_entry_mb: int = Field(
        50, gt=0, description="Largest decompressed manifest entry, in MiB"
    )
    max_missing_listed: int = Field(
        5, ge=1, description="Missing resources named in the report message"
    )
    dev_mode: bool = False

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @property
    def max_entry_bytes(self) -> int:
        return self.max_entry_mb * 1024 * 1024


def load_settings() -> ValidatorSettings:
    """Load options from ELPCHECK_OPTIONS_PATH, or from env vars when absent."""
    opts_path = os.environ.get("ELPCHECK_OPTIONS_PATH", "/data/options.json")
    dev_mode = bool(os.environ.get("ELPCHECK_DEV_MODE"))
    if Path(opts_path).exists():
        options = json.loads(Path(opts_path).read_text())
        options.setdefault("dev_mode", dev_mode)
        return ValidatorSettings.model_validate(options)
    return ValidatorSettings(
        max_upload_mb=int(os.environ.get("ELPCHECK_MAX_UPLOAD_MB", "100")),
        max_entry_mb=int(os.environ.get("ELPCHECK_MAX_ENTRY_MB", "50")),
        max_missing_listed=int(os.environ.get("ELPCHECK_MAX_MISSING_LISTED", "5")),
        dev_mode=dev_mode,
    )
