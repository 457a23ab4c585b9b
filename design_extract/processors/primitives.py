"""Colour codec and hierarchical name normalization shared by both engines.

Figma stores colour channels as floats in [0, 1]; tokens are emitted as
``#RRGGBB`` hex or ``rgba(R, G, B, A)`` strings. Designer-authored names such
as ``"Primary/Blue/500"`` become flat identifiers (``"primary-blue-500"``).
"""

import math
import re
from typing import Any, Dict

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
_DASH_RUN_RE = re.compile(r"-+")


def _channel(value: float) -> int:
    """Scale a 0-1 channel to 0-255, rounding halves up (no clamping)."""
    return int(math.floor(value * 255 + 0.5))


def _format_alpha(alpha: Any) -> str:
    if isinstance(alpha, float) and alpha.is_integer():
        return str(int(alpha))
    return str(alpha)


def rgb_to_hex(color: Dict[str, float]) -> str:
    """Convert Figma RGB float dict {r,g,b} to an uppercase ``#RRGGBB`` string.

    Channels outside [0, 1] are not clamped and yield out-of-range digits
    (e.g. ``r=1.2`` → ``132``).
    """
    r = _channel(color["r"])
    g = _channel(color["g"])
    b = _channel(color["b"])
    return f"#{r:02X}{g:02X}{b:02X}"


def rgba_to_string(color: Dict[str, float]) -> str:
    """Convert Figma RGBA float dict to ``rgba(R, G, B, A)``; alpha defaults to 1."""
    r = _channel(color["r"])
    g = _channel(color["g"])
    b = _channel(color["b"])
    a = color.get("a")
    if a is None:
        a = 1
    return f"rgba({r}, {g}, {b}, {_format_alpha(a)})"


def sanitize_token_name(name: str) -> str:
    """Lowercase, map non-alphanumerics to '-', collapse and trim dashes.

    Examples:
        "Blue 500" → "blue-500"
        "  Héllo__World " → "h-llo-world"
    """
    lowered = name.lower()
    dashed = _NON_ALNUM_RE.sub("-", lowered)
    collapsed = _DASH_RUN_RE.sub("-", dashed)
    return collapsed.strip("-")


def normalize_token_name(style_name: str) -> str:
    """Flatten a slash-delimited design name into a hyphenated token name.

    Each segment is trimmed and sanitized on its own before joining, so
    ``"Primary / Blue/500"`` → ``"primary-blue-500"``. Input without any
    alphanumeric character may produce an empty string (or bare dashes for
    multi-segment names); callers insert it into token maps as-is.
    """
    segments = [sanitize_token_name(part.strip()) for part in style_name.split("/")]
    return "-".join(segments).lower()
