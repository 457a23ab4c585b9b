"""Screenshot analysis through the Claude CLI.

The image bytes are written to a temporary file and the CLI is allowed to
``Read`` it. The CLI runs with ``--output-format json``; the model's text is
taken from the envelope's ``result`` field and returned untouched, so JSON
recovery stays with the caller.
"""

import asyncio
import json
import logging
import os
import random
import tempfile
import time
from typing import Dict, Optional

from ..config import CLAUDE_CLI_PATH, VISION_MODEL
from ..settings import VISION_MAX_RETRIES, VISION_RETRY_BASE_DELAY, VISION_TIMEOUT

logger = logging.getLogger(__name__)

USER_PROMPT = (
    "Please analyze this design screenshot and generate the comprehensive JSON "
    "design system profile as specified in the system prompt."
)

_SUFFIXES: Dict[str, str] = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/webp": ".webp",
}

_RATE_LIMIT_MARKERS = ("rate", "429", "overloaded", "too many", "throttl")


class VisionError(RuntimeError):
    """Raised when the Claude CLI fails or times out after all retries."""


def _build_command(claude_bin: str, prompt_text: str, image_path: str, model: str) -> list:
    cli_prompt = "\n".join([
        prompt_text,
        "",
        f"First, read the screenshot image at: {image_path}",
        "Use this screenshot as the only source for your analysis.",
        "",
        USER_PROMPT,
    ])
    cmd = [
        claude_bin,
        "-p", cli_prompt,
        "--output-format", "json",
        "--dangerously-skip-permissions",
        "--no-session-persistence",
        "--allowedTools", "Read",
    ]
    if model:
        cmd.extend(["--model", model])
    return cmd


def _envelope_text(raw_text: str) -> str:
    """Model text from the CLI JSON envelope, or the raw stdout if there is none."""
    try:
        envelope = json.loads(raw_text)
    except json.JSONDecodeError:
        return raw_text
    if isinstance(envelope, dict):
        if "result" in envelope:
            return envelope["result"]
        if "content" in envelope:
            return envelope["content"]
    return raw_text


async def _run_once(cmd: list, env: Dict[str, str], timeout: float) -> str:
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        env=env,
    )
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.communicate()
        raise VisionError(f"Claude CLI timed out ({timeout}s)")

    raw_text = stdout.decode("utf-8", errors="replace").strip()
    envelope = None
    try:
        envelope = json.loads(raw_text)
    except json.JSONDecodeError:
        pass

    if proc.returncode != 0 or (isinstance(envelope, dict) and envelope.get("is_error")):
        err_msg = stderr.decode("utf-8", errors="replace").strip()
        if not err_msg and isinstance(envelope, dict):
            err_msg = str(envelope.get("result", ""))
        raise VisionError(f"Claude CLI failed (exit {proc.returncode}): {err_msg[:500]}")

    return _envelope_text(raw_text)


async def analyze_image(
    image_bytes: bytes,
    prompt_text: str,
    *,
    content_type: str = "image/png",
    model: str = VISION_MODEL,
    claude_bin: str = CLAUDE_CLI_PATH,
    timeout: float = VISION_TIMEOUT,
    max_retries: int = VISION_MAX_RETRIES,
    retry_base_delay: float = VISION_RETRY_BASE_DELAY,
) -> str:
    """Ask the model to describe a screenshot; returns its free-form text.

    Transient failures (non-zero exit, timeout, spawn error) are retried with
    exponential backoff and jitter. Rate-limit errors wait at least 30s.

    Raises VisionError once every attempt has failed.
    """
    suffix = _SUFFIXES.get(content_type, ".png")
    fd, image_path = tempfile.mkstemp(prefix="screenshot-", suffix=suffix)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(image_bytes)

        cmd = _build_command(claude_bin, prompt_text, image_path, model)
        # Nested sessions are refused when CLAUDECODE is inherited
        env = {k: v for k, v in os.environ.items() if k != "CLAUDECODE"}

        last_error: Optional[Exception] = None
        rate_limited = False
        attempts = 1 + max(0, max_retries)
        start = time.monotonic()

        for attempt in range(attempts):
            if attempt > 0:
                base = retry_base_delay * (2 ** (attempt - 1))
                if rate_limited:
                    base = max(base, 30.0)
                delay = base * (1.0 + random.uniform(-0.25, 0.25))
                logger.warning(
                    "Vision: retry %d/%d after %.1fs%s (previous error: %s)",
                    attempt, max_retries, delay,
                    " [rate-limited]" if rate_limited else "",
                    last_error,
                )
                await asyncio.sleep(delay)

            logger.info(
                "Vision: analyzing screenshot (%d bytes, attempt %d/%d)",
                len(image_bytes), attempt + 1, attempts,
            )
            try:
                text = await _run_once(cmd, env, timeout)
            except VisionError as e:
                last_error = e
                rate_limited = any(m in str(e).lower() for m in _RATE_LIMIT_MARKERS)
                continue
            except OSError as e:
                last_error = VisionError(f"Claude CLI spawn failed: {e}")
                continue

            logger.info(
                "Vision: response received (%d chars, %dms)",
                len(text), int((time.monotonic() - start) * 1000),
            )
            return text

        raise last_error or VisionError(f"Claude CLI failed after {attempts} attempts")
    finally:
        try:
            os.unlink(image_path)
        except OSError:
            logger.debug("Vision: could not remove temp file %s", image_path)
