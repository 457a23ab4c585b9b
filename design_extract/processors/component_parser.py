"""Component Extraction Engine: Figma components → ComponentSpec list.

Sources, in order:

1. PRIMARY   local components (``file.components``)          always run
2. PRIMARY   component sets with variants (``file.componentSets``) always run
3. SECONDARY published components (``/components`` endpoint)  always appended
4. TERTIARY  COMPONENT / COMPONENT_SET nodes in the document  only if 1-3 empty
5. FALLBACK  sample button / input / card specs               only if 1-4 empty

The result is never empty.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..models import ComponentSpec, PropertyBag
from .primitives import rgb_to_hex, rgba_to_string
from .results import ExtractionReport
from .scales import typography_scale_name
from .tree import Node, find_node_by_id, find_nodes_by_type

logger = logging.getLogger(__name__)

COMPONENT_NODE_TYPES = ("COMPONENT", "COMPONENT_SET")

# Node attributes copied verbatim into the property bag when present
_LAYOUT_KEYS = (
    "layoutMode",
    "primaryAxisSizingMode",
    "counterAxisSizingMode",
)
_NUMERIC_KEYS = (
    "itemSpacing",
    "paddingLeft",
    "paddingRight",
    "paddingTop",
    "paddingBottom",
    "cornerRadius",
)


def _fallback_components() -> List[ComponentSpec]:
    return [
        ComponentSpec(
            id="button-component",
            name="Button",
            type="component",
            properties={
                "variant": ["primary", "secondary", "outline"],
                "size": ["sm", "md", "lg"],
                "disabled": "boolean",
                "text": "string",
            },
            description="Primary button component with multiple variants",
        ),
        ComponentSpec(
            id="input-component",
            name="Input",
            type="component",
            properties={
                "type": ["text", "email", "password"],
                "placeholder": "string",
                "disabled": "boolean",
                "required": "boolean",
            },
            description="Input field component",
        ),
        ComponentSpec(
            id="card-component",
            name="Card",
            type="component",
            properties={
                "elevation": ["none", "sm", "md", "lg"],
                "padding": ["sm", "md", "lg"],
                "rounded": "boolean",
            },
            description="Card container component",
        ),
    ]


def _drop_none(record: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in record.items() if v is not None}


def _paint_to_dict(paint: Dict[str, Any]) -> Dict[str, Any]:
    color = paint.get("color")
    return _drop_none({
        "type": paint.get("type"),
        "color": rgb_to_hex(color) if color else None,
        "opacity": paint.get("opacity"),
    })


def _effect_to_dict(effect: Dict[str, Any]) -> Dict[str, Any]:
    color = effect.get("color")
    return _drop_none({
        "type": effect.get("type"),
        "visible": effect.get("visible"),
        "radius": effect.get("radius"),
        "color": rgba_to_string(color) if color else None,
        "offset": effect.get("offset"),
    })


def _text_style_to_dict(style: Dict[str, Any]) -> Dict[str, Any]:
    """Text style record; lineHeight is px when known, else the percent value."""
    return _drop_none({
        "fontFamily": style.get("fontFamily"),
        "fontSize": style.get("fontSize"),
        "fontWeight": style.get("fontWeight"),
        "lineHeight": style.get("lineHeightPx") or style.get("lineHeightPercent"),
        "letterSpacing": style.get("letterSpacing"),
        "textCase": style.get("textCase"),
        "scale": typography_scale_name(style.get("fontSize"), style.get("fontWeight")),
    })


def extract_component_properties(node: Node) -> PropertyBag:
    """Build the property bag of a component node.

    Only attributes present on the node are emitted, never null placeholders.
    """
    properties: PropertyBag = {}

    if node.get("type"):
        properties["nodeType"] = node["type"]
    if node.get("visible") is not None:
        properties["visible"] = node["visible"]
    bbox = node.get("absoluteBoundingBox")
    if bbox:
        if bbox.get("width") is not None:
            properties["width"] = bbox["width"]
        if bbox.get("height") is not None:
            properties["height"] = bbox["height"]

    for key in _LAYOUT_KEYS:
        if node.get(key):
            properties[key] = node[key]
    for key in _NUMERIC_KEYS:
        if node.get(key) is not None:
            properties[key] = node[key]
    if node.get("rectangleCornerRadii"):
        properties["cornerRadii"] = node["rectangleCornerRadii"]

    if node.get("fills"):
        properties["fills"] = [_paint_to_dict(f) for f in node["fills"]]
    if node.get("strokes"):
        properties["strokes"] = [_paint_to_dict(s) for s in node["strokes"]]
    if node.get("strokeWeight") is not None:
        properties["strokeWeight"] = node["strokeWeight"]
    if node.get("effects"):
        properties["effects"] = [_effect_to_dict(e) for e in node["effects"]]

    if node.get("style"):
        properties["textStyle"] = _text_style_to_dict(node["style"])

    return properties


def extract_variants(node: Node) -> Dict[str, Dict[str, Any]]:
    """Variant property definitions of a component set node."""
    variants: Dict[str, Dict[str, Any]] = {}
    definitions = node.get("componentPropertyDefinitions") or {}
    for prop_name, prop_def in definitions.items():
        variants[prop_name] = {
            "type": prop_def.get("type"),
            "defaultValue": prop_def.get("defaultValue"),
            "variantOptions": prop_def.get("variantOptions") or [],
        }
    return variants


def _metadata_properties(meta: Dict[str, Any]) -> PropertyBag:
    return {
        "componentKey": meta.get("key"),
        "remote": meta.get("remote"),
        "documentationLinks": meta.get("documentationLinks") or [],
    }


class ComponentParser:
    """Builds the component-specs document from Figma API payloads.

    A component whose analysis fails is logged, recorded in ``self.report``
    and left out; the rest of the batch continues.
    """

    def __init__(self) -> None:
        self.report = ExtractionReport()

    def parse_components(
        self,
        file_data: Dict[str, Any],
        components_data: Dict[str, Any],
    ) -> Dict[str, Any]:
        self.report = ExtractionReport()
        components = self.extract_components(file_data, components_data)
        return {
            "components": [c.to_dict() for c in components],
            "version": file_data.get("version"),
            "lastModified": file_data.get("lastModified"),
        }

    def extract_components(
        self,
        file_data: Dict[str, Any],
        components_data: Dict[str, Any],
    ) -> List[ComponentSpec]:
        document = file_data.get("document")
        extracted: List[ComponentSpec] = []

        local_components = file_data.get("components")
        if isinstance(local_components, dict) and local_components:
            logger.info(f"Extracting {len(local_components)} components from file data...")
            for component_id, meta in local_components.items():
                spec = self._analyze_component(component_id, meta, document)
                if spec:
                    extracted.append(spec)

        component_sets = file_data.get("componentSets")
        if isinstance(component_sets, dict) and component_sets:
            logger.info(f"Extracting {len(component_sets)} component sets with variants...")
            for set_id, meta in component_sets.items():
                spec = self._analyze_component_set(set_id, meta, document)
                if spec:
                    extracted.append(spec)

        published = (components_data.get("meta") or {}).get("components") or []
        if published:
            logger.info(f"Adding {len(published)} published components from API...")
            for meta in published:
                spec = self._published_component(meta)
                if spec:
                    extracted.append(spec)
        if extracted:
            self.report.sources["components"] = "file"

        if not extracted and document:
            logger.info("Searching document tree for components...")
            extracted.extend(self._components_from_document(document))
            if extracted:
                self.report.sources["components"] = "document"

        if not extracted:
            logger.warning("No components found, using sample data...")
            extracted.extend(_fallback_components())
            self.report.sources["components"] = "fallback"

        logger.info(f"Successfully extracted {len(extracted)} total components")
        return extracted

    # ------------------------------------------------------------------
    # Per-source builders
    # ------------------------------------------------------------------

    def _analyze_component(
        self,
        component_id: str,
        meta: Dict[str, Any],
        document: Optional[Node],
    ) -> Optional[ComponentSpec]:
        try:
            name = meta.get("name") or f"Component {component_id}"
            logger.info(f"Analyzing component: {name}")
            node = find_node_by_id(document, component_id)
            if node:
                properties = extract_component_properties(node)
                logger.info(f"Found component node for {name}, extracted {len(properties)} properties")
            else:
                properties = _metadata_properties(meta)
                logger.warning(f"Component node not found for {name}, using metadata only")

            return ComponentSpec(
                id=component_id,
                name=name,
                type="component",
                properties=properties,
                description=meta.get("description") or f"Local component: {meta.get('name') or component_id}",
            )
        except Exception as e:
            logger.warning(f"Error analyzing component {component_id}: {e}")
            self.report.skip("component", component_id, e)
            return None

    def _analyze_component_set(
        self,
        set_id: str,
        meta: Dict[str, Any],
        document: Optional[Node],
    ) -> Optional[ComponentSpec]:
        try:
            name = meta.get("name") or f"ComponentSet {set_id}"
            logger.info(f"Analyzing component set: {name}")
            node = find_node_by_id(document, set_id)
            if node:
                properties = extract_component_properties(node)
                variants = extract_variants(node)
                logger.info(
                    f"Found component set node for {name}, extracted {len(properties)} "
                    f"properties and {len(variants)} variants"
                )
            else:
                properties = _metadata_properties(meta)
                variants = {}
                logger.warning(f"Component set node not found for {name}, using metadata only")

            return ComponentSpec(
                id=set_id,
                name=name,
                type="component-set",
                properties=properties,
                variants=variants,
                description=meta.get("description") or f"Component set with variants: {meta.get('name') or set_id}",
            )
        except Exception as e:
            logger.warning(f"Error analyzing component set {set_id}: {e}")
            self.report.skip("component-set", set_id, e)
            return None

    def _published_component(self, meta: Dict[str, Any]) -> Optional[ComponentSpec]:
        try:
            name = meta.get("name", "")
            return ComponentSpec(
                id=meta["key"],
                name=name,
                type="published-component",
                properties=_drop_none({
                    "nodeId": meta.get("node_id"),
                    "fileKey": meta.get("file_key"),
                    "thumbnailUrl": meta.get("thumbnail_url"),
                    "createdAt": meta.get("created_at"),
                    "updatedAt": meta.get("updated_at"),
                }),
                description=meta.get("description") or f"Published component: {name}",
            )
        except Exception as e:
            if isinstance(meta, dict):
                item = str(meta.get("key") or meta.get("name") or "?")
            else:
                item = repr(meta)[:50]
            logger.warning(f"Error reading published component {item}: {e}")
            self.report.skip("published-component", item, e)
            return None

    def _components_from_document(self, document: Node) -> List[ComponentSpec]:
        specs: List[ComponentSpec] = []
        for node in find_nodes_by_type(document, COMPONENT_NODE_TYPES):
            specs.append(ComponentSpec(
                id=node.get("id", ""),
                name=node.get("name", ""),
                type=node["type"].lower(),
                properties=_drop_none({
                    "nodeType": node["type"],
                    "visible": node.get("visible") is not False,
                    "absoluteBoundingBox": node.get("absoluteBoundingBox"),
                }),
                description=f"Component extracted from file: {node.get('name', '')}",
            ))
        return specs
