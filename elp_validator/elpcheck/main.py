"""FastAPI application -- ELP package validator entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

import elpcheck.deps as deps
from elpcheck.api.validate import VERSION
from elpcheck.api.validate import router as validate_router
from elpcheck.config import load_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: load settings on startup, drop them on shutdown."""
    settings = load_settings()
    log_level = logging.DEBUG if settings.dev_mode else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("ELP validator starting with options: %s", settings.model_dump())

    deps._settings = settings

    yield

    deps._settings = None


app = FastAPI(
    title="ELP Validator",
    version=VERSION,
    lifespan=lifespan,
)

app.include_router(validate_router)
