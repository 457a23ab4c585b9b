"""Tests for design_extract.integrations.figma_client."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from design_extract.config import ConfigurationError
from design_extract.integrations.figma_client import FetchError, FigmaClient


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def client():
    """Create a FigmaClient with a test token."""
    return FigmaClient(token="test-figma-token-123")


def _response(status_code=200, payload=None, text=""):
    mock_resp = MagicMock()
    mock_resp.status_code = status_code
    mock_resp.json.return_value = payload if payload is not None else {}
    mock_resp.text = text
    return mock_resp


def _patched_http(client, response=None, side_effect=None):
    """Patch client._get_client to return an AsyncMock HTTP client."""
    patcher = patch.object(client, "_get_client")
    mock_get_client = patcher.start()
    mock_http = AsyncMock()
    mock_http.get = AsyncMock(return_value=response, side_effect=side_effect)
    mock_get_client.return_value = mock_http
    return patcher, mock_http


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestFigmaClientInit:

    def test_creates_with_explicit_token(self):
        c = FigmaClient(token="my-token")
        assert c._token == "my-token"

    def test_reads_token_from_config(self):
        with patch("design_extract.config.FIGMA_TOKEN", "env-token"):
            c = FigmaClient()
        assert c._token == "env-token"

    def test_raises_without_token(self):
        with patch("design_extract.config.FIGMA_TOKEN", ""):
            with pytest.raises(ConfigurationError, match="FIGMA_API_TOKEN"):
                FigmaClient()


class TestGetFile:

    @pytest.mark.asyncio
    async def test_returns_document(self, client, sample_file_data):
        patcher, mock_http = _patched_http(client, _response(payload=sample_file_data))
        try:
            result = await client.get_file("abcdefghijkl")
        finally:
            patcher.stop()

        assert result["name"] == "Design System"
        mock_http.get.assert_called_once_with("/v1/files/abcdefghijkl", params=None)

    @pytest.mark.asyncio
    async def test_403_raises_auth_error(self, client):
        patcher, _ = _patched_http(client, _response(403, text="Forbidden"))
        try:
            with pytest.raises(FetchError, match="403 Forbidden") as exc_info:
                await client.get_file("abcdefghijkl")
        finally:
            patcher.stop()
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_404_raises_not_found(self, client):
        patcher, _ = _patched_http(client, _response(404))
        try:
            with pytest.raises(FetchError, match="not found"):
                await client.get_file("abcdefghijkl")
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    async def test_429_raises_rate_limit(self, client):
        patcher, _ = _patched_http(client, _response(429, text="Rate limited"))
        try:
            with pytest.raises(FetchError, match="rate limit"):
                await client.get_file("abcdefghijkl")
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    async def test_500_includes_body(self, client):
        patcher, _ = _patched_http(client, _response(500, text="boom"))
        try:
            with pytest.raises(FetchError, match="500: boom"):
                await client.get_file("abcdefghijkl")
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    async def test_timeout_wrapped(self, client):
        patcher, _ = _patched_http(client, side_effect=httpx.ReadTimeout("slow"))
        try:
            with pytest.raises(FetchError, match="timeout"):
                await client.get_file("abcdefghijkl")
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    async def test_connection_error_wrapped(self, client):
        patcher, _ = _patched_http(client, side_effect=httpx.ConnectError("refused"))
        try:
            with pytest.raises(FetchError, match="connection error"):
                await client.get_file("abcdefghijkl")
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    async def test_invalid_json(self, client):
        resp = _response()
        resp.json.side_effect = ValueError("bad json")
        patcher, _ = _patched_http(client, resp)
        try:
            with pytest.raises(FetchError, match="invalid JSON"):
                await client.get_file("abcdefghijkl")
        finally:
            patcher.stop()


class TestOtherEndpoints:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method, path", [
        ("get_file_styles", "/v1/files/abcdefghijkl/styles"),
        ("get_file_components", "/v1/files/abcdefghijkl/components"),
        ("get_local_variables", "/v1/files/abcdefghijkl/variables/local"),
    ])
    async def test_paths(self, client, method, path):
        patcher, mock_http = _patched_http(client, _response(payload={"meta": {}}))
        try:
            result = await getattr(client, method)("abcdefghijkl")
        finally:
            patcher.stop()

        assert result == {"meta": {}}
        mock_http.get.assert_called_once_with(path, params=None)


class TestClientLifecycle:

    @pytest.mark.asyncio
    async def test_client_sends_token_header(self, client):
        http = await client._get_client()
        try:
            assert http.headers["X-FIGMA-TOKEN"] == "test-figma-token-123"
            assert str(http.base_url).startswith("https://api.figma.com")
        finally:
            await client.close()
        assert client._client is None

    @pytest.mark.asyncio
    async def test_context_manager_closes(self):
        async with FigmaClient(token="t") as c:
            await c._get_client()
        assert c._client is None
