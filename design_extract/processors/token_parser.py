"""Token Extraction Engine: Figma variables/styles/nodes → design tokens.

Each of the six token categories resolves through an ordered list of
sources; the first source producing at least one token wins:

    color         variables (COLOR)  → FILL styles           → fallback
    typography    TEXT styles                                → fallback
    spacing       variables ("spacing") → node traversal      → fallback
    effects       EFFECT styles + file effect styles          → fallback
    borderRadius  variables ("radius"/"border") → traversal   → fallback
    strokeWeight  variables ("stroke"/"weight") → traversal   → fallback

Typography variables are not modelled by Figma's REST payloads in a usable
form, so typography starts at published text styles.

Inputs are the raw JSON dicts returned by the Figma API:
- file_data:      GET /v1/files/:key
- styles_data:    GET /v1/files/:key/styles
- variables_data: GET /v1/files/:key/variables/local
"""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..models import DesignTokens
from ..settings import RADIUS_TOP_N, SPACING_TOP_N, STROKE_TOP_N
from .primitives import normalize_token_name, rgb_to_hex, rgba_to_string
from .results import ExtractionReport, ItemAnalysisError
from .scales import border_radius_scale_name, spacing_scale_name, stroke_weight_scale_name
from .tree import Node, count_values

logger = logging.getLogger(__name__)

TokenMap = Dict[str, Any]
TokenSource = Tuple[str, Callable[[], TokenMap]]

# =====================================================================
# Fallback tables: emitted when every source for a category is empty
# =====================================================================

FALLBACK_COLORS: Dict[str, str] = {
    "primary": "#007AFF",
    "secondary": "#5AC8FA",
    "accent": "#F43F5E",
    "neutral": "#8E8E93",
}

FALLBACK_TYPOGRAPHY: Dict[str, Dict[str, Any]] = {
    "heading-xl": {"fontSize": 32, "fontWeight": 700, "lineHeight": 1.2},
    "heading-lg": {"fontSize": 24, "fontWeight": 600, "lineHeight": 1.3},
    "body": {"fontSize": 16, "fontWeight": 400, "lineHeight": 1.5},
}

FALLBACK_SPACING: Dict[str, float] = {"xs": 4, "sm": 8, "md": 16, "lg": 24, "xl": 32}

FALLBACK_EFFECTS: Dict[str, Dict[str, Any]] = {
    "shadow-sm": {
        "type": "dropShadow",
        "x": 0,
        "y": 1,
        "blur": 3,
        "spread": 0,
        "color": "rgba(0, 0, 0, 0.1)",
    },
    "shadow-lg": {
        "type": "dropShadow",
        "x": 0,
        "y": 4,
        "blur": 6,
        "spread": -1,
        "color": "rgba(0, 0, 0, 0.1)",
    },
}

FALLBACK_BORDER_RADIUS: Dict[str, float] = {
    "none": 0,
    "sm": 2,
    "md": 4,
    "lg": 8,
    "xl": 12,
    "full": 9999,
}

FALLBACK_STROKE_WEIGHTS: Dict[str, float] = {"thin": 1, "normal": 2, "thick": 4}

DEFAULT_SHADOW_COLOR = "rgba(0, 0, 0, 0.1)"
SHADOW_TYPES = ("DROP_SHADOW", "INNER_SHADOW")

# Case-insensitive name fragments selecting FLOAT variables per category
SPACING_NAME_HINTS = ("spacing",)
RADIUS_NAME_HINTS = ("radius", "border")
STROKE_NAME_HINTS = ("stroke", "weight")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _truthy_number(value: Any) -> bool:
    return _is_number(value) and value != 0


# =====================================================================
# Value extraction from raw style data
# =====================================================================


def color_from_style_data(style_data: Dict[str, Any]) -> Optional[str]:
    """Hex colour of the first fill when it is a SOLID paint."""
    fills = style_data.get("fills") or []
    if not fills:
        return None
    fill = fills[0]
    if fill.get("type") == "SOLID" and fill.get("color"):
        return rgb_to_hex(fill["color"])
    return None


def typography_from_style_data(style_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Typography record from a text style's ``style`` block.

    lineHeight is a unitless ratio: lineHeightPx / fontSize, else
    lineHeightPercent / 100, else 1.4.
    """
    text_style = style_data.get("style")
    if not text_style:
        return None

    font_size = text_style.get("fontSize") or 16
    if text_style.get("lineHeightPx"):
        line_height = text_style["lineHeightPx"] / font_size
    elif text_style.get("lineHeightPercent"):
        line_height = text_style["lineHeightPercent"] / 100
    else:
        line_height = 1.4

    return {
        "fontSize": font_size,
        "fontWeight": text_style.get("fontWeight") or 400,
        "lineHeight": line_height,
        "fontFamily": text_style.get("fontFamily") or "Inter",
        "letterSpacing": text_style.get("letterSpacing") or 0,
        "textTransform": text_style.get("textCase") or "none",
    }


def effect_from_style_data(style_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Shadow record from the first effect of an effect style.

    Only drop/inner shadows produce a token; blurs are ignored.
    """
    effects = style_data.get("effects") or []
    if not effects:
        return None
    effect = effects[0]
    effect_type = effect.get("type")
    if effect_type not in SHADOW_TYPES:
        return None

    offset = effect.get("offset") or {}
    color = effect.get("color")
    return {
        "type": effect_type.lower().replace("_", "", 1),
        "x": offset.get("x") or 0,
        "y": offset.get("y") or 0,
        "blur": effect.get("radius") or 0,
        "spread": effect.get("spread") or 0,
        "color": rgba_to_string(color) if color else DEFAULT_SHADOW_COLOR,
    }


# =====================================================================
# Raw node value extractors (for count_values)
# =====================================================================


def node_spacing_values(node: Node) -> Iterator[float]:
    """Auto-layout gap plus left/top padding; zero values are not counted."""
    if node.get("layoutMode") and _truthy_number(node.get("itemSpacing")):
        yield node["itemSpacing"]
    if _truthy_number(node.get("paddingLeft")):
        yield node["paddingLeft"]
    if _truthy_number(node.get("paddingTop")):
        yield node["paddingTop"]


def node_radius_values(node: Node) -> Iterator[float]:
    """Uniform and per-corner radii of rectangles and frames."""
    if node.get("type") not in ("RECTANGLE", "FRAME"):
        return
    if _truthy_number(node.get("cornerRadius")):
        yield node["cornerRadius"]
    radii = node.get("rectangleCornerRadii")
    if isinstance(radii, list):
        for radius in radii:
            if _is_number(radius):
                yield radius


def node_stroke_values(node: Node) -> Iterator[float]:
    if _truthy_number(node.get("strokeWeight")):
        yield node["strokeWeight"]


class TokenParser:
    """Builds the design-tokens document from Figma API payloads.

    The parser never raises on malformed items: each failure is logged and
    recorded in ``self.report`` and the item is left out.
    """

    def __init__(self) -> None:
        self.report = ExtractionReport()

    def parse_tokens(
        self,
        file_data: Dict[str, Any],
        styles_data: Dict[str, Any],
        variables_data: Dict[str, Any],
    ) -> DesignTokens:
        logger.info("Extracting design tokens from published styles and variables...")
        self.report = ExtractionReport()

        variables = (variables_data.get("meta") or {}).get("variables") or {}
        collections = (variables_data.get("meta") or {}).get("variableCollections") or {}
        styles_meta = (styles_data.get("meta") or {}).get("styles") or []
        file_styles = file_data.get("styles") or {}
        document = file_data.get("document")

        logger.info(
            f"parse_tokens: variables={len(variables)}, collections={len(collections)}, "
            f"published_styles={len(styles_meta)}"
        )

        tokens: DesignTokens = {
            "color": self.resolve_first("color", [
                ("variables", lambda: self._color_variables(variables, collections)),
                ("styles", lambda: self._color_styles(styles_meta, file_styles)),
            ], FALLBACK_COLORS),
            "typography": self.resolve_first("typography", [
                ("styles", lambda: self._typography_styles(styles_meta, file_styles)),
            ], FALLBACK_TYPOGRAPHY),
            "spacing": self.resolve_first("spacing", [
                ("variables", lambda: self._number_variables(
                    "spacing", variables, collections, SPACING_NAME_HINTS)),
                ("nodes", lambda: self._most_frequent(
                    document, node_spacing_values, spacing_scale_name, SPACING_TOP_N)),
            ], FALLBACK_SPACING),
            "effects": self.resolve_first("effects", [
                ("styles", lambda: self._effect_styles(styles_meta, file_styles)),
            ], FALLBACK_EFFECTS),
            "borderRadius": self.resolve_first("borderRadius", [
                ("variables", lambda: self._number_variables(
                    "borderRadius", variables, collections, RADIUS_NAME_HINTS)),
                ("nodes", lambda: self._most_frequent(
                    document, node_radius_values, border_radius_scale_name, RADIUS_TOP_N)),
            ], FALLBACK_BORDER_RADIUS),
            "strokeWeight": self.resolve_first("strokeWeight", [
                ("variables", lambda: self._number_variables(
                    "strokeWeight", variables, collections, STROKE_NAME_HINTS)),
                ("nodes", lambda: self._most_frequent(
                    document, node_stroke_values, stroke_weight_scale_name, STROKE_TOP_N)),
            ], FALLBACK_STROKE_WEIGHTS),
        }

        if self.report.skipped:
            logger.warning(f"parse_tokens: skipped {len(self.report.skipped)} items")
        logger.info("Design system extraction complete")
        return tokens

    # ------------------------------------------------------------------
    # Precedence chain
    # ------------------------------------------------------------------

    def resolve_first(
        self,
        category: str,
        sources: List[TokenSource],
        fallback: TokenMap,
    ) -> TokenMap:
        """Return the first non-empty source result, else a copy of ``fallback``."""
        for label, extract in sources:
            tokens = extract()
            if tokens:
                self.report.sources[category] = label
                logger.info(f"{category}: {len(tokens)} tokens from {label}")
                return tokens
            logger.info(f"{category}: no tokens from {label}")

        self.report.sources[category] = "fallback"
        logger.info(f"{category}: using fallback table")
        return deepcopy(fallback)

    # ------------------------------------------------------------------
    # Variables source
    # ------------------------------------------------------------------

    @staticmethod
    def _default_mode_value(variable: Dict[str, Any], collections: Dict[str, Any]) -> Any:
        collection = collections.get(variable.get("variableCollectionId"))
        if not collection:
            raise ItemAnalysisError("variable collection not found")
        mode_id = collection.get("defaultModeId")
        values_by_mode = variable.get("valuesByMode") or {}
        if mode_id not in values_by_mode:
            raise ItemAnalysisError(f"no value for default mode {mode_id}")
        return values_by_mode[mode_id]

    @staticmethod
    def _is_variable_of_type(variable: Any, resolved_type: str) -> bool:
        if not isinstance(variable, dict):
            raise ItemAnalysisError("variable is not an object")
        return variable.get("resolvedType") == resolved_type

    @staticmethod
    def _variable_name(variable: Dict[str, Any], var_id: str) -> str:
        name = variable.get("name", var_id)
        if not isinstance(name, str):
            raise ItemAnalysisError(f"variable name is not a string: {name!r}")
        return name

    def _color_variables(self, variables: Dict[str, Any], collections: Dict[str, Any]) -> TokenMap:
        colors: TokenMap = {}
        for var_id, variable in variables.items():
            name = str(var_id)
            try:
                if not self._is_variable_of_type(variable, "COLOR"):
                    continue
                name = self._variable_name(variable, var_id)
                value = self._default_mode_value(variable, collections)
                if not isinstance(value, dict) or any(value.get(c) is None for c in ("r", "g", "b")):
                    raise ItemAnalysisError("default mode value is not an RGB colour")
                colors[normalize_token_name(name)] = rgb_to_hex(value)
            except Exception as e:
                logger.warning(f"Could not extract color from variable {name}: {e}")
                self.report.skip("color", name, e)
        return colors

    def _number_variables(
        self,
        category: str,
        variables: Dict[str, Any],
        collections: Dict[str, Any],
        name_hints: Tuple[str, ...],
    ) -> TokenMap:
        numbers: TokenMap = {}
        for var_id, variable in variables.items():
            name = str(var_id)
            try:
                if not self._is_variable_of_type(variable, "FLOAT"):
                    continue
                name = self._variable_name(variable, var_id)
                if not any(hint in name.lower() for hint in name_hints):
                    continue
                value = self._default_mode_value(variable, collections)
                if not _is_number(value):
                    raise ItemAnalysisError("default mode value is not a number")
                numbers[normalize_token_name(name)] = value
            except Exception as e:
                logger.warning(f"Could not extract number from variable {name}: {e}")
                self.report.skip(category, name, e)
        return numbers

    # ------------------------------------------------------------------
    # Published styles source
    # ------------------------------------------------------------------

    def _styles_of_type(
        self,
        category: str,
        style_type: str,
        styles_meta: List[Dict[str, Any]],
        file_styles: Dict[str, Any],
        extract: Callable[[Dict[str, Any]], Optional[Dict[str, Any]]],
    ) -> Iterator[Tuple[Dict[str, Any], str, Any]]:
        """Yield (style, token name, extracted value) for each resolvable style."""
        matching = []
        for style in styles_meta:
            if not isinstance(style, dict):
                logger.warning(f"Skipping {category} style metadata that is not an object: {style!r}")
                self.report.skip(category, repr(style)[:50], ItemAnalysisError("style metadata is not an object"))
                continue
            if style.get("style_type") == style_type:
                matching.append(style)
        if matching:
            logger.info(f"Found {len(matching)} published {style_type} styles")
        for style in matching:
            name = style.get("name", "")
            try:
                style_data = file_styles.get(style.get("key"))
                if not style_data:
                    raise ItemAnalysisError("style data not found in file styles")
                value = extract(style_data)
                if value is None:
                    raise ItemAnalysisError(f"no {category} value in style data")
                yield style, normalize_token_name(name), value
            except Exception as e:
                logger.warning(f"Could not extract {category} from style {name}: {e}")
                self.report.skip(category, name, e)

    def _color_styles(self, styles_meta: List[Dict[str, Any]], file_styles: Dict[str, Any]) -> TokenMap:
        colors: TokenMap = {}
        for _style, token_name, value in self._styles_of_type(
            "color", "FILL", styles_meta, file_styles, color_from_style_data,
        ):
            colors[token_name] = value
        return colors

    def _typography_styles(self, styles_meta: List[Dict[str, Any]], file_styles: Dict[str, Any]) -> TokenMap:
        typography: TokenMap = {}
        for style, token_name, value in self._styles_of_type(
            "typography", "TEXT", styles_meta, file_styles, typography_from_style_data,
        ):
            typography[token_name] = {
                **value,
                "name": style.get("name", ""),
                "description": style.get("description") or "",
            }
        return typography

    def _effect_styles(self, styles_meta: List[Dict[str, Any]], file_styles: Dict[str, Any]) -> TokenMap:
        effects: TokenMap = {}
        for style, token_name, value in self._styles_of_type(
            "effects", "EFFECT", styles_meta, file_styles, effect_from_style_data,
        ):
            effects[token_name] = {
                **value,
                "name": style.get("name", ""),
                "description": style.get("description") or "",
            }
        # File-level effect styles win ties with the published ones
        effects.update(self._file_effect_styles(file_styles))
        return effects

    def _file_effect_styles(self, file_styles: Dict[str, Any]) -> TokenMap:
        effects: TokenMap = {}
        for style_id, style_data in file_styles.items():
            if not isinstance(style_data, dict):
                continue
            if style_data.get("styleType") != "EFFECT" or not style_data.get("name"):
                continue
            try:
                value = effect_from_style_data(style_data)
                if value is not None:
                    effects[normalize_token_name(style_data["name"])] = value
            except Exception as e:
                logger.warning(f"Could not extract effect from file style {style_id}: {e}")
                self.report.skip("effects", style_data["name"], e)
        return effects

    # ------------------------------------------------------------------
    # Raw node traversal source
    # ------------------------------------------------------------------

    @staticmethod
    def _most_frequent(
        document: Optional[Node],
        extract: Callable[[Node], Iterator[float]],
        scale_name: Callable[[float], str],
        top_n: int,
    ) -> TokenMap:
        """Name the ``top_n`` most frequent values by their scale bucket.

        Values sharing a bucket overwrite each other, so the least frequent
        of them ends up in the map.
        """
        counts = count_values(document, extract)
        tokens: TokenMap = {}
        for value, _count in counts.most_common(top_n):
            tokens[scale_name(value)] = value
        return tokens
