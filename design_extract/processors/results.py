"""Per-item outcome tracking for the extraction engines.

A failing variable, style or component never aborts its batch: the engines
record it as a ``SkippedItem`` and move on. The ``ExtractionReport`` keeps
those records so callers and tests can see what was dropped and why.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


class ItemAnalysisError(Exception):
    """Raised while deriving the value of a single variable/style/component."""


@dataclass(frozen=True)
class SkippedItem:
    """One item dropped during extraction."""
    category: str  # e.g. "color", "typography", "component"
    item: str  # variable/style name or component id
    reason: str


@dataclass
class ExtractionReport:
    """Skipped items and the source each category was resolved from."""
    skipped: List[SkippedItem] = field(default_factory=list)
    sources: Dict[str, str] = field(default_factory=dict)

    def skip(self, category: str, item: str, reason: Any) -> None:
        self.skipped.append(SkippedItem(category=category, item=item, reason=str(reason)))

    def skipped_in(self, category: str) -> List[SkippedItem]:
        return [s for s in self.skipped if s.category == category]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sources": dict(self.sources),
            "skipped": [
                {"category": s.category, "item": s.item, "reason": s.reason}
                for s in self.skipped
            ],
        }
