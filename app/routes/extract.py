"""Extraction API endpoints.

POST /api/extract             Figma file → design tokens + component specs
POST /api/extract-from-image  screenshot → component specs (vision model)
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, File, HTTPException, UploadFile
from pydantic import BaseModel, Field

from design_extract import config
from design_extract.config import ConfigurationError, validate_vision_config
from design_extract.extractor import ExtractorService
from design_extract.image_analysis import ImageValidationError, extract_from_image, validate_image
from design_extract.integrations.figma_client import FetchError, FigmaClient
from design_extract.integrations.vision_client import VisionError
from design_extract.processors.response_json import ParseError
from design_extract.utils import extract_file_key_from_url

logger = logging.getLogger("app.routes.extract")

router = APIRouter(prefix="/api", tags=["extract"])


# --- Schemas ---


class ExtractRequest(BaseModel):
    """Request for POST /api/extract."""

    fileKey: str = Field(
        "",
        description=(
            "Figma file key, or a URL such as https://www.figma.com/design/{fileKey}/{name}"
        ),
    )


class ExtractResponse(BaseModel):
    """Response for both extraction endpoints."""

    success: bool = True
    data: Dict[str, Any] = Field(default_factory=dict)


# --- Endpoints ---


@router.post("/extract", response_model=ExtractResponse)
async def extract(payload: ExtractRequest):
    """Extract design tokens and component specs from a Figma file.

    Requires FIGMA_API_TOKEN environment variable.

    Usage:
        POST /api/extract
        { "fileKey": "6kGd851qaAX4TiL44vpIrO" }
    """
    file_key = _parse_file_key(payload.fileKey)

    if not config.FIGMA_TOKEN:
        raise HTTPException(
            status_code=400,
            detail=(
                "Figma integration not configured. "
                "Set FIGMA_API_TOKEN environment variable with a valid Figma Personal Access Token. "
                "See: https://www.figma.com/developers/api#access-tokens"
            ),
        )

    try:
        client = FigmaClient()
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    service = ExtractorService(client)
    try:
        result = await service.extract_data_from_figma(file_key)
    except FetchError as e:
        logger.warning(f"extract: Figma fetch failed for {file_key}: {e}")
        raise HTTPException(status_code=502, detail=f"Figma API error: {e}")
    finally:
        await service.close()

    return ExtractResponse(success=True, data=result)


@router.post("/extract-from-image", response_model=ExtractResponse)
async def extract_image(image: UploadFile = File(None)):
    """Generate component specs from a design screenshot.

    Accepts PNG, JPEG or WebP up to 20MB as multipart field ``image``.
    Requires the Claude CLI (CLAUDE_CLI_PATH).
    """
    if image is None:
        raise HTTPException(status_code=400, detail="No image file provided")

    content = await image.read()
    try:
        validate_image(image.content_type, len(content))
        validate_vision_config()
        component_specs = await extract_from_image(content, image.content_type)
    except ImageValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ParseError as e:
        raise HTTPException(
            status_code=500,
            detail={
                "error": "Failed to parse AI response as valid JSON",
                "details": str(e),
                "rawResponse": e.raw_excerpt,
            },
        )
    except VisionError as e:
        logger.warning(f"extract-from-image: vision analysis failed: {e}")
        raise HTTPException(status_code=502, detail=f"Image analysis failed: {e}")

    return ExtractResponse(success=True, data={"componentSpecs": component_specs})


# --- Helpers ---


def _parse_file_key(value: str) -> str:
    """Return the file key from a bare key or a Figma URL.

    Raises:
        HTTPException if the key is missing or the URL format is invalid
    """
    value = (value or "").strip()
    if not value:
        raise HTTPException(status_code=400, detail="File key is required")
    if "figma.com" not in value:
        return value

    file_key = extract_file_key_from_url(value)
    if not file_key:
        raise HTTPException(
            status_code=400,
            detail=(
                "Invalid Figma URL. Expected format: "
                "https://www.figma.com/design/{fileKey}/..."
            ),
        )
    return file_key
