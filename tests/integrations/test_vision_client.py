"""Tests for design_extract.integrations.vision_client."""

import asyncio
import json
import os
import re
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from design_extract.integrations.vision_client import VisionError, analyze_image

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def _proc(stdout: str = "", stderr: str = "", returncode: int = 0):
    proc = MagicMock()
    proc.communicate = AsyncMock(return_value=(stdout.encode(), stderr.encode()))
    proc.returncode = returncode
    proc.kill = MagicMock()
    return proc


def _envelope(result: str, **extra) -> str:
    return json.dumps({"type": "result", "result": result, **extra})


def _image_path(cmd) -> str:
    prompt = cmd[cmd.index("-p") + 1]
    return re.search(r"read the screenshot image at: (\S+)", prompt).group(1)


class TestAnalyzeImage:

    @pytest.mark.asyncio
    async def test_returns_envelope_result(self):
        seen = {}

        async def fake_exec(*cmd, **kwargs):
            path = _image_path(cmd)
            with open(path, "rb") as f:
                seen["bytes"] = f.read()
            seen["cmd"] = cmd
            seen["path"] = path
            seen["env"] = kwargs["env"]
            return _proc(_envelope('{"components": []}'))

        with patch("asyncio.create_subprocess_exec", side_effect=fake_exec):
            text = await analyze_image(
                PNG_BYTES, "SYSTEM", claude_bin="claude", model="sonnet", max_retries=0,
            )

        assert text == '{"components": []}'
        assert seen["bytes"] == PNG_BYTES
        assert seen["path"].endswith(".png")
        assert not os.path.exists(seen["path"])
        cmd = list(seen["cmd"])
        assert cmd[0] == "claude"
        assert cmd[cmd.index("--model") + 1] == "sonnet"
        assert cmd[cmd.index("--allowedTools") + 1] == "Read"
        assert cmd[cmd.index("-p") + 1].startswith("SYSTEM")
        assert "CLAUDECODE" not in seen["env"]

    @pytest.mark.asyncio
    async def test_no_model_flag_when_empty(self):
        proc = _proc(_envelope("ok"))
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)) as mock_exec:
            await analyze_image(PNG_BYTES, "SYSTEM", claude_bin="claude", model="", max_retries=0)
        assert "--model" not in mock_exec.call_args.args

    @pytest.mark.asyncio
    async def test_webp_suffix(self):
        proc = _proc(_envelope("ok"))
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)) as mock_exec:
            await analyze_image(
                PNG_BYTES, "SYSTEM", content_type="image/webp", claude_bin="claude", max_retries=0,
            )
        assert _image_path(mock_exec.call_args.args).endswith(".webp")

    @pytest.mark.asyncio
    async def test_plain_stdout_without_envelope(self):
        proc = _proc("just text")
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            text = await analyze_image(PNG_BYTES, "SYSTEM", claude_bin="claude", max_retries=0)
        assert text == "just text"

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self):
        procs = [_proc("", "overloaded", returncode=1), _proc(_envelope("second try"))]
        with patch("asyncio.create_subprocess_exec", AsyncMock(side_effect=procs)) as mock_exec, \
                patch("asyncio.sleep", AsyncMock()) as mock_sleep:
            text = await analyze_image(
                PNG_BYTES, "SYSTEM", claude_bin="claude", max_retries=1, retry_base_delay=10,
            )
        assert text == "second try"
        assert mock_exec.call_count == 2
        # Rate-limit errors wait at least 30s (minus jitter)
        assert mock_sleep.call_args.args[0] >= 22.5

    @pytest.mark.asyncio
    async def test_is_error_envelope_fails(self):
        proc = _proc(_envelope("auth failed", is_error=True))
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            with pytest.raises(VisionError, match="auth failed"):
                await analyze_image(PNG_BYTES, "SYSTEM", claude_bin="claude", max_retries=0)

    @pytest.mark.asyncio
    async def test_spawn_failure_exhausts_retries(self):
        with patch("asyncio.create_subprocess_exec", AsyncMock(side_effect=FileNotFoundError("claude"))), \
                patch("asyncio.sleep", AsyncMock()):
            with pytest.raises(VisionError, match="spawn failed"):
                await analyze_image(PNG_BYTES, "SYSTEM", claude_bin="claude", max_retries=2)

    @pytest.mark.asyncio
    async def test_timeout(self):
        async def fake_wait_for(coro, timeout):
            coro.close()
            raise asyncio.TimeoutError()

        proc = _proc()
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)), \
                patch("asyncio.wait_for", side_effect=fake_wait_for):
            with pytest.raises(VisionError, match="timed out"):
                await analyze_image(
                    PNG_BYTES, "SYSTEM", claude_bin="claude", timeout=1, max_retries=0,
                )
        proc.kill.assert_called_once()
