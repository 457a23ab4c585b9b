"""Command-line entry point.

Usage:
    python -m design_extract <figma-file-key-or-url> [output-directory]

    python -m design_extract abc123def456ghi
    python -m design_extract "https://www.figma.com/design/abc123def456ghi/App" ./my-tokens

Requires:
    - FIGMA_API_TOKEN env var (https://www.figma.com/developers/api#access-tokens)
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import OUTPUT_DIR, ConfigurationError, validate_config
from .extractor import ExtractorService
from .integrations.figma_client import FetchError, FigmaClient
from .logging_config import get_extract_logger
from .utils import extract_file_key_from_url, is_valid_figma_file_key

logger = logging.getLogger("design_extract.cli")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m design_extract",
        description="Figma design token & component extractor",
    )
    parser.add_argument(
        "file_key",
        help="Figma file key, or a figma.com/file/... or /design/... URL",
    )
    parser.add_argument(
        "output_dir",
        nargs="?",
        default=OUTPUT_DIR,
        help=f"Directory for design-tokens.json and component-specs.json (default: {OUTPUT_DIR})",
    )
    return parser.parse_args(argv)


def _file_key(value: str) -> Optional[str]:
    if "figma.com" in value:
        return extract_file_key_from_url(value)
    return value.strip() or None


async def run(file_key: str, output_dir: str) -> None:
    token = validate_config()
    service = ExtractorService(FigmaClient(token=token))
    try:
        await service.extract_from_figma(file_key, output_dir)
    finally:
        await service.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    get_extract_logger()

    file_key = _file_key(args.file_key)
    if not file_key:
        logger.error(f"Could not read a Figma file key from {args.file_key!r}")
        return 1
    if not is_valid_figma_file_key(file_key):
        logger.warning(f"{file_key!r} does not look like a Figma file key, trying anyway")

    logger.info(f"Starting Figma extraction: file={file_key}, output={args.output_dir}")
    try:
        asyncio.run(run(file_key, args.output_dir))
    except ConfigurationError as e:
        logger.error(str(e))
        return 1
    except FetchError as e:
        logger.error(f"Extraction failed: {e}")
        return 1

    logger.info("Extraction completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
