"""Recover a JSON object from free-form AI response text.

Models often wrap the requested JSON in prose or a markdown fence. Three
candidates are tried in order, the first that parses wins:

1. the whole text
2. the first fenced code block (optionally tagged ``json``) holding ``{...}``
3. the span from the first ``{`` to the last ``}``

Nothing is repaired or partially parsed: either one candidate is valid JSON
or ``ParseError`` is raised.
"""

import json
import logging
import re
from typing import Any

from ..settings import RAW_EXCERPT_CHARS

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```")


class ParseError(Exception):
    """Raised when no JSON object could be recovered from an AI response."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_excerpt = raw_text[:RAW_EXCERPT_CHARS]


def parse_json_from_ai_response(content: str) -> Any:
    """Parse JSON from an AI response, handling markdown fences and preamble."""
    try:
        return json.loads(content)
    except (json.JSONDecodeError, TypeError):
        pass

    if not isinstance(content, str):
        raise ParseError("AI response is not text", "")

    fence_match = _FENCE_RE.search(content)
    if fence_match:
        try:
            return json.loads(fence_match.group(1))
        except json.JSONDecodeError:
            pass

    brace_start = content.find("{")
    brace_end = content.rfind("}")
    if brace_start != -1 and brace_end > brace_start:
        try:
            return json.loads(content[brace_start:brace_end + 1])
        except json.JSONDecodeError:
            pass

    logger.error("AI response JSON parse error, raw[:%d]: %s", RAW_EXCERPT_CHARS, content[:RAW_EXCERPT_CHARS])
    raise ParseError("No valid JSON found in AI response", content)
