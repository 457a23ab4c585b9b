"""Figma REST API client for design token and component extraction.

Fetches the file document, published styles, published components and
local variables using Personal Access Token (PAT) authentication.

Environment:
    FIGMA_API_TOKEN: Figma Personal Access Token (required; FIGMA_TOKEN also accepted)

Usage:
    client = FigmaClient()
    file_data, styles_data = await asyncio.gather(
        client.get_file("6kGd851qaAX4TiL44vpIrO"),
        client.get_file_styles("6kGd851qaAX4TiL44vpIrO"),
    )
"""

import logging
from typing import Any, Dict, Optional

import httpx

from .. import config
from ..config import FIGMA_API_BASE, ConfigurationError
from ..settings import FIGMA_HTTP_TIMEOUT

logger = logging.getLogger("design_extract.integrations.figma")


class FetchError(Exception):
    """Raised when a Figma API call fails (transport, auth, not found, rate limit)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class FigmaClient:
    """Async Figma REST API client.

    Args:
        token: Figma PAT. Falls back to FIGMA_API_TOKEN / FIGMA_TOKEN env vars.
        timeout: HTTP request timeout in seconds.
        base_url: API origin, overridable for tests/proxies.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        timeout: float = FIGMA_HTTP_TIMEOUT,
        base_url: str = FIGMA_API_BASE,
    ):
        self._token = token or config.FIGMA_TOKEN
        if not self._token:
            raise ConfigurationError(
                "Figma token not configured. Set FIGMA_API_TOKEN environment variable "
                "or pass token= to FigmaClient()."
            )
        self._client: Optional[httpx.AsyncClient] = None
        self._timeout = timeout
        self._base_url = base_url

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={"X-FIGMA-TOKEN": self._token},
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=5, max_keepalive_connections=3),
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "FigmaClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get(self, path: str, params: Optional[Dict] = None) -> Dict[str, Any]:
        """Make a GET request to the Figma API."""
        client = await self._get_client()
        try:
            resp = await client.get(path, params=params)
        except httpx.TimeoutException as e:
            raise FetchError(f"Figma API timeout: {path}") from e
        except httpx.TransportError as e:
            raise FetchError(f"Figma API connection error: {path}") from e

        if resp.status_code == 403:
            raise FetchError(
                "Figma API returned 403 Forbidden. Check that FIGMA_API_TOKEN is valid "
                "and has file_content:read scope.",
                status_code=403,
            )
        if resp.status_code == 404:
            raise FetchError(f"Figma resource not found: {path}", status_code=404)
        if resp.status_code == 429:
            raise FetchError("Figma API rate limit exceeded. Retry later.", status_code=429)
        if resp.status_code != 200:
            raise FetchError(
                f"Figma API error {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )

        try:
            return resp.json()
        except ValueError as e:
            raise FetchError(f"Figma API returned invalid JSON: {path}") from e

    # ------------------------------------------------------------------
    # Core API methods
    # ------------------------------------------------------------------

    async def get_file(self, file_key: str) -> Dict[str, Any]:
        """Fetch the full file document.

        GET /v1/files/:key
        """
        data = await self._get(f"/v1/files/{file_key}")
        logger.info(
            f"get_file: file={file_key}, name={data.get('name', '')!r}, "
            f"components={len(data.get('components') or {})}, "
            f"component_sets={len(data.get('componentSets') or {})}"
        )
        return data

    async def get_file_styles(self, file_key: str) -> Dict[str, Any]:
        """Fetch published styles metadata.

        GET /v1/files/:key/styles
        """
        data = await self._get(f"/v1/files/{file_key}/styles")
        styles = (data.get("meta") or {}).get("styles") or []
        logger.info(f"get_file_styles: file={file_key}, styles_count={len(styles)}")
        return data

    async def get_file_components(self, file_key: str) -> Dict[str, Any]:
        """Fetch published components metadata.

        GET /v1/files/:key/components
        """
        data = await self._get(f"/v1/files/{file_key}/components")
        components = (data.get("meta") or {}).get("components") or []
        logger.info(f"get_file_components: file={file_key}, components_count={len(components)}")
        for comp in components:
            logger.debug(f"  {comp.get('name')} ({comp.get('key')}) - node {comp.get('node_id')}")
        return data

    async def get_local_variables(self, file_key: str) -> Dict[str, Any]:
        """Fetch local variables and variable collections.

        GET /v1/files/:key/variables/local
        """
        data = await self._get(f"/v1/files/{file_key}/variables/local")
        meta = data.get("meta") or {}
        logger.info(
            f"get_local_variables: file={file_key}, "
            f"variables={len(meta.get('variables') or {})}, "
            f"collections={len(meta.get('variableCollections') or {})}"
        )
        return data
