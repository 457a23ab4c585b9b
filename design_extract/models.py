"""Output document shapes: design tokens and component specifications."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, TypedDict, Union

# Open-ended value stored in a component's property bag
PropertyValue = Union[
    str, int, float, bool, None,
    List["PropertyValue"],
    Dict[str, "PropertyValue"],
]

PropertyBag = Dict[str, PropertyValue]

TOKEN_CATEGORIES = (
    "color",
    "typography",
    "spacing",
    "effects",
    "borderRadius",
    "strokeWeight",
)


class DesignTokens(TypedDict):
    """The design-tokens document: six independent name → value maps."""
    color: Dict[str, str]
    typography: Dict[str, Dict[str, Any]]
    spacing: Dict[str, float]
    effects: Dict[str, Dict[str, Any]]
    borderRadius: Dict[str, float]
    strokeWeight: Dict[str, float]


@dataclass(frozen=True)
class ComponentSpec:
    """A single component specification, built once per extraction pass."""
    id: str
    name: str
    type: str  # component | component-set | published-component | lowercased node type
    properties: PropertyBag
    variants: Optional[Dict[str, Dict[str, Any]]] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "properties": self.properties,
        }
        if self.variants is not None:
            result["variants"] = self.variants
        if self.description is not None:
            result["description"] = self.description
        return result
