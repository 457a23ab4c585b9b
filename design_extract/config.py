"""Extractor configuration constants: single source of truth for all env vars."""

import os
import shutil
from typing import Optional

# Figma REST API: Personal Access Token for design file access.
# FIGMA_API_TOKEN is the documented name; FIGMA_TOKEN is accepted as well.
FIGMA_TOKEN = os.getenv("FIGMA_API_TOKEN") or os.getenv("FIGMA_TOKEN", "")
FIGMA_API_BASE = os.getenv("FIGMA_API_BASE", "https://api.figma.com")

# Claude CLI: resolved once at import time, used for screenshot analysis
CLAUDE_CLI_PATH = os.getenv("CLAUDE_CLI_PATH") or shutil.which("claude") or "claude"

# Vision model for screenshot analysis. Empty = CLI default.
VISION_MODEL = os.getenv("VISION_MODEL", "")

# Default output directory for the CLI entry point
OUTPUT_DIR = os.getenv("OUTPUT_DIR", "./output")



class ConfigurationError(Exception):
    """Raised when a required credential or tool is not configured."""


def validate_config(token: Optional[str] = None) -> str:
    """Return the Figma token, raising ConfigurationError when it is missing."""
    token = token if token is not None else FIGMA_TOKEN
    if not token:
        raise ConfigurationError(
            "FIGMA_API_TOKEN environment variable is required. "
            "Get a token from https://www.figma.com/developers/api#access-tokens"
        )
    return token


def validate_vision_config(cli_path: Optional[str] = None) -> str:
    """Return the Claude CLI path, raising ConfigurationError if it cannot be found."""
    cli_path = cli_path or CLAUDE_CLI_PATH
    if not (os.path.isfile(cli_path) or shutil.which(cli_path)):
        raise ConfigurationError(
            f"Claude CLI not found at '{cli_path}'. Set CLAUDE_CLI_PATH env var."
        )
    return cli_path
