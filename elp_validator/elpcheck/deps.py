"""Shared FastAPI dependencies."""

from __future__ import annotations

from elpcheck.config import ValidatorSettings

_settings: ValidatorSettings | None = None


def get_settings() -> ValidatorSettings:
    """FastAPI dependency: return the loaded ValidatorSettings."""
    assert _settings is not None, "ValidatorSettings not initialised"
    return _settings
