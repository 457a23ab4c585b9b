"""FastAPI Application Entry Point.

Configures the app, lifespan, CORS, and includes the extraction routes.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from design_extract.logging_config import get_api_logger, get_extract_logger

logger = logging.getLogger("app.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Warn about missing integrations at startup."""
    get_api_logger()
    get_extract_logger()

    from design_extract import config
    if not config.FIGMA_TOKEN:
        logger.warning(
            "FIGMA_API_TOKEN not set: /api/extract will be unavailable. "
            "Set FIGMA_API_TOKEN in .env or environment to enable Figma extraction."
        )
    try:
        config.validate_vision_config()
    except config.ConfigurationError as e:
        logger.warning(f"{e} /api/extract-from-image will be unavailable.")

    yield


app = FastAPI(title="Design Extract API", version="1.0.0", lifespan=lifespan)

# CORS configuration: configurable via CORS_ORIGINS env var (comma-separated)
_default_origins = "http://localhost:3000,http://127.0.0.1:3000"
CORS_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ORIGINS", _default_origins).split(",") if o.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from .routes.extract import router as extract_router  # noqa: E402

app.include_router(extract_router)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "ok"}
