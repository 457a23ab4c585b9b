"""Extraction service: fetch a Figma file and normalize it into the two documents.

    file + styles        (required, fetched concurrently)
    components           (optional, degrades to an empty list)
    variables            (optional, degrades to empty maps)
        │
        ├── TokenParser      → design-tokens.json
        └── ComponentParser  → component-specs.json
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .config import OUTPUT_DIR
from .integrations.figma_client import FetchError, FigmaClient
from .processors.component_parser import ComponentParser
from .processors.token_parser import TokenParser

logger = logging.getLogger(__name__)

DESIGN_TOKENS_FILE = "design-tokens.json"
COMPONENT_SPECS_FILE = "component-specs.json"


def _empty_components() -> Dict[str, Any]:
    return {"meta": {"components": []}}


def _empty_variables() -> Dict[str, Any]:
    return {"meta": {"variables": {}, "variableCollections": {}}}


def write_json_file(path: Path, data: Any) -> None:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


class ExtractorService:
    """Runs one extraction per call; parsers are reused, their reports reset per run.

    Args:
        client: Figma client to use. Created from FIGMA_API_TOKEN when omitted,
            which raises ConfigurationError if the token is missing.
    """

    def __init__(self, client: Optional[FigmaClient] = None):
        self.client = client or FigmaClient()
        self.token_parser = TokenParser()
        self.component_parser = ComponentParser()

    async def close(self) -> None:
        await self.client.close()

    async def _fetch_optional(self, label: str, fetch, file_key: str, empty: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return await fetch(file_key)
        except (FetchError, AttributeError, TypeError) as e:
            logger.warning(f"Could not fetch {label} for {file_key}, continuing without them: {e}")
            return empty

    def _log_reports(self) -> None:
        for title, report in (
            ("tokens", self.token_parser.report),
            ("components", self.component_parser.report),
        ):
            logger.info(f"{title} sources: {report.sources}")
            categories = dict.fromkeys(s.category for s in report.skipped)
            for category in categories:
                items = [s.item for s in report.skipped_in(category)]
                logger.warning(f"Skipped {len(items)} {category} item(s): {', '.join(items)}")

    async def extract_data_from_figma(self, file_key: str) -> Dict[str, Any]:
        """Fetch all sources and return ``{"designTokens": ..., "componentSpecs": ...}``.

        Raises FetchError when the file or its styles cannot be fetched.
        """
        logger.info(f"Fetching Figma file data for {file_key}...")
        file_data, styles_data = await asyncio.gather(
            self.client.get_file(file_key),
            self.client.get_file_styles(file_key),
        )
        components_data = await self._fetch_optional(
            "published components", self.client.get_file_components, file_key, _empty_components(),
        )
        variables_data = await self._fetch_optional(
            "local variables", self.client.get_local_variables, file_key, _empty_variables(),
        )

        logger.info(
            f"Fetched file {file_data.get('name', '')!r}: "
            f"styles={len((styles_data.get('meta') or {}).get('styles') or [])}, "
            f"published_components={len((components_data.get('meta') or {}).get('components') or [])}"
        )

        design_tokens = self.token_parser.parse_tokens(file_data, styles_data, variables_data)
        component_specs = self.component_parser.parse_components(file_data, components_data)
        self._log_reports()

        return {
            "designTokens": design_tokens,
            "componentSpecs": component_specs,
        }

    async def extract_from_figma(self, file_key: str, output_dir: str = OUTPUT_DIR) -> Dict[str, Path]:
        """Extract and write both documents under ``output_dir``; returns the written paths."""
        data = await self.extract_data_from_figma(file_key)

        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        paths = {
            "designTokens": out / DESIGN_TOKENS_FILE,
            "componentSpecs": out / COMPONENT_SPECS_FILE,
        }
        write_json_file(paths["designTokens"], data["designTokens"])
        write_json_file(paths["componentSpecs"], data["componentSpecs"])

        for path in paths.values():
            logger.info(f"Wrote {path}")
        return paths
