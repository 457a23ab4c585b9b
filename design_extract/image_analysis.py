"""Screenshot path: validate the upload, ask the vision model, recover its JSON.

Only component specs are produced; design tokens are not derived from
screenshots.
"""

import logging
from typing import Any, Dict, Optional

from .config import VISION_MODEL
from .integrations.vision_client import analyze_image
from .processors.response_json import ParseError, parse_json_from_ai_response
from .prompts import COMPONENT_SPECS_SYSTEM_PROMPT
from .settings import IMAGE_MAX_BYTES
from .utils import format_timestamp

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_TYPES = ("image/png", "image/jpeg", "image/jpg", "image/webp")


class ImageValidationError(ValueError):
    """Raised when an upload is not a supported image or is too large."""


def validate_image(content_type: Optional[str], size: int) -> None:
    if not content_type or not content_type.startswith("image/"):
        raise ImageValidationError("File must be an image")
    if content_type not in SUPPORTED_IMAGE_TYPES:
        raise ImageValidationError("Supported formats: PNG, JPG, WebP")
    if size > IMAGE_MAX_BYTES:
        raise ImageValidationError(
            f"File size must be less than {IMAGE_MAX_BYTES // (1024 * 1024)}MB"
        )


def format_file_size(size: int) -> str:
    if size == 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 2):g} {units[i]}"


async def extract_from_image(
    image_bytes: bytes,
    content_type: str,
    *,
    model: str = VISION_MODEL,
    prompt_text: str = COMPONENT_SPECS_SYSTEM_PROMPT,
) -> Dict[str, Any]:
    """Return the model's component-specs object annotated with ``metadata``.

    Raises ImageValidationError before any model call, VisionError if the CLI
    fails, and ParseError if the response holds no JSON object.
    """
    validate_image(content_type, len(image_bytes))
    logger.info(f"Analyzing screenshot: type={content_type}, size={format_file_size(len(image_bytes))}")

    raw_text = await analyze_image(
        image_bytes, prompt_text, content_type=content_type, model=model,
    )

    parsed = parse_json_from_ai_response(raw_text)
    if not isinstance(parsed, dict):
        logger.error(f"AI response is not a JSON object: {type(parsed).__name__}")
        raise ParseError("AI response is not a valid JSON object", raw_text)

    component_specs = dict(parsed)
    component_specs["metadata"] = {
        "source": "ai-analysis",
        "timestamp": format_timestamp(),
        "model": model or "claude-cli-default",
        "type": "component-specs",
    }
    logger.info(f"Screenshot analysis complete: {len(component_specs.get('components') or [])} components")
    return component_specs
