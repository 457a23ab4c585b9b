"""Figma URL / file-key helpers and timestamps."""

import re
from datetime import datetime, timezone
from typing import Optional

_FIGMA_URL_RE = re.compile(r"figma\.com/(?:file|design)/([a-zA-Z0-9]+)")
_FILE_KEY_RE = re.compile(r"^[a-zA-Z0-9]+$")


def extract_file_key_from_url(url: str) -> Optional[str]:
    """Return the file key from a figma.com/file/... or /design/... URL."""
    match = _FIGMA_URL_RE.search(url)
    return match.group(1) if match else None


def is_valid_figma_file_key(file_key: str) -> bool:
    # Figma file keys are alphanumeric and longer than 10 characters
    return bool(_FILE_KEY_RE.match(file_key)) and len(file_key) > 10


def format_timestamp(timestamp: Optional[str] = None) -> str:
    """ISO-8601 UTC timestamp; unparseable or missing input yields now."""
    if timestamp:
        try:
            parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        except ValueError:
            parsed = None
        if parsed is not None:
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return _iso(parsed.astimezone(timezone.utc))
    return _iso(datetime.now(timezone.utc))


def _iso(moment: datetime) -> str:
    # Millisecond precision with a Z suffix, e.g. 2024-01-02T03:04:05.678Z
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
