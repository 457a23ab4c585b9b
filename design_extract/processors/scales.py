"""Semantic scale bucketing: raw measurements to ordinal token labels.

Checks run in ascending threshold order and the first match wins, so a
value sitting exactly on a boundary lands in the smaller bucket.
"""

from typing import List, Optional, Tuple

_SPACING_SCALE: List[Tuple[float, str]] = [
    (2, "xs"),
    (4, "sm"),
    (8, "md"),
    (12, "lg"),
    (16, "xl"),
    (24, "2xl"),
    (32, "3xl"),
    (48, "4xl"),
]

_RADIUS_SCALE: List[Tuple[float, str]] = [
    (2, "sm"),
    (4, "md"),
    (8, "lg"),
    (12, "xl"),
    (16, "2xl"),
]

_STROKE_SCALE: List[Tuple[float, str]] = [
    (1, "thin"),
    (2, "normal"),
    (4, "medium"),
    (6, "thick"),
]

# (min font size, heading label, regular label)
_TYPOGRAPHY_SCALE: List[Tuple[float, str, str]] = [
    (32, "heading-xl", "display-xl"),
    (24, "heading-lg", "display-lg"),
    (20, "heading-md", "display-md"),
    (18, "heading-sm", "text-lg"),
    (16, "text-bold", "text-base"),
    (14, "text-sm", "text-sm"),
]

# Radius values at or above this are treated as pill/circle shapes
FULL_RADIUS_THRESHOLD = 1000

HEADING_WEIGHT = 600


def _first_at_most(value: float, scale: List[Tuple[float, str]]) -> Optional[str]:
    for upper, label in scale:
        if value <= upper:
            return label
    return None


def spacing_scale_name(spacing: float) -> str:
    """Map a spacing value (px) to none / xs … 4xl / 5xl."""
    if spacing == 0:
        return "none"
    return _first_at_most(spacing, _SPACING_SCALE) or "5xl"


def border_radius_scale_name(radius: float) -> str:
    """Map a corner radius (px) to none / sm … 2xl / 3xl / full.

    The ``full`` check only sees values above 16: everything up to 16 has
    already matched a smaller bucket.
    """
    if radius == 0:
        return "none"
    label = _first_at_most(radius, _RADIUS_SCALE)
    if label:
        return label
    if radius >= FULL_RADIUS_THRESHOLD:
        return "full"
    return "3xl"


def stroke_weight_scale_name(weight: float) -> str:
    """Map a stroke weight (px) to thin / normal / medium / thick / extra-thick."""
    return _first_at_most(weight, _STROKE_SCALE) or "extra-thick"


def typography_scale_name(font_size: Optional[float] = None, font_weight: Optional[float] = None) -> str:
    """Derive a typography token key from font size and weight.

    Missing (or zero) size / weight default to 16 / 400.
    """
    size = font_size or 16
    weight = font_weight or 400
    for min_size, heading, regular in _TYPOGRAPHY_SCALE:
        if size >= min_size:
            return heading if weight >= HEADING_WEIGHT else regular
    return "text-xs"
