"""POST /api/validate endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel, Field

from elpcheck.config import ValidatorSettings
from elpcheck.deps import get_settings
from elpcheck.validator import (
    ManifestVariant,
    NamedCheck,
    PackageMetadata,
    validate_package,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["validate"])

VERSION = "0.1.0"


class ValidateResponse(BaseModel):
    """Response body for POST /api/validate."""

    filename: str = Field("", description="Name of the uploaded file")
    size_bytes: int = Field(0, description="Upload size in bytes")
    valid: bool = Field(..., description="True when no check reported an error")
    checks: list[NamedCheck] = Field(default_factory=list)
    variant: ManifestVariant | None = None
    manifest_entry: str | None = None
    metadata: PackageMetadata | None = None
    resource_paths: list[str] = Field(default_factory=list)
    missing_resources: list[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = VERSION


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse()


@router.post("/validate", response_model=ValidateResponse)
async def validate_upload(
    file: UploadFile = File(..., description="The .elp package to validate"),
    settings: ValidatorSettings = Depends(get_settings),
) -> ValidateResponse:
    """Validate an uploaded package and return the ordered check report."""
    data = await file.read(settings.max_upload_bytes + 1)
    if not data:
        raise HTTPException(status_code=400, detail="The uploaded file is empty.")
    if len(data) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"The uploaded file exceeds {settings.max_upload_mb} MB.",
        )

    report = validate_package(data, settings.max_missing_listed, settings.max_entry_bytes)
    logger.info(
        "Validated %s (%d bytes): %s, %d check(s)",
        file.filename,
        len(data),
        "valid" if report.valid else "invalid",
        len(report.checks),
    )

    return ValidateResponse(
        filename=file.filename or "",
        size_bytes=len(data),
        valid=report.valid,
        checks=report.checks,
        variant=report.variant,
        manifest_entry=report.manifest_entry,
        metadata=report.metadata,
        resource_paths=report.resource_paths,
        missing_resources=report.missing_resources,
    )
