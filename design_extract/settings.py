"""Extractor runtime settings: tunable parameters for extraction runs.

All values read from environment variables with sensible defaults.
Import from here instead of hardcoding.

Infrastructure config (tokens, CLI path, API host) stays in
design_extract/config.py.
"""

from __future__ import annotations

import os


def _int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


def _float(key: str, default: float) -> float:
    return float(os.getenv(key, str(default)))


# =====================================================================
# Figma fetch
# =====================================================================

# HTTP request timeout for Figma REST calls (seconds)
FIGMA_HTTP_TIMEOUT = _float("FIGMA_HTTP_TIMEOUT", 60.0)


# =====================================================================
# Token extraction (raw node traversal)
# =====================================================================

# Most frequent distinct values kept per category when mining the node tree
SPACING_TOP_N = _int("SPACING_TOP_N", 15)
RADIUS_TOP_N = _int("RADIUS_TOP_N", 10)
STROKE_TOP_N = _int("STROKE_TOP_N", 10)


# =====================================================================
# Screenshot analysis
# =====================================================================

# Claude CLI call timeout (seconds)
VISION_TIMEOUT = _float("VISION_TIMEOUT", 300.0)

# Retries on transient CLI failures, with exponential backoff
VISION_MAX_RETRIES = _int("VISION_MAX_RETRIES", 1)
VISION_RETRY_BASE_DELAY = _float("VISION_RETRY_BASE_DELAY", 10.0)

# Upload limit for screenshots (bytes)
IMAGE_MAX_BYTES = _int("IMAGE_MAX_BYTES", 20 * 1024 * 1024)

# Characters of an unparseable AI response kept for diagnostics
RAW_EXCERPT_CHARS = _int("RAW_EXCERPT_CHARS", 500)
