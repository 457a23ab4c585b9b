"""Root conftest for extraction tests.

Provides:
- Sample Figma payloads (file, styles, components, variables)
- FastAPI test client over ASGITransport
"""

from __future__ import annotations

from typing import Any, AsyncGenerator, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ---------------------------------------------------------------------------
# Figma payloads
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_file_data() -> Dict[str, Any]:
    """Figma GET /v1/files/:key response with one component and one set."""
    return {
        "name": "Design System",
        "version": "1234567890",
        "lastModified": "2024-05-01T10:00:00Z",
        "document": {
            "id": "0:0",
            "name": "Document",
            "type": "DOCUMENT",
            "children": [
                {
                    "id": "0:1",
                    "name": "Page 1",
                    "type": "CANVAS",
                    "children": [
                        {
                            "id": "1:1",
                            "name": "Button",
                            "type": "COMPONENT",
                            "visible": True,
                            "absoluteBoundingBox": {"x": 0, "y": 0, "width": 120, "height": 40},
                            "layoutMode": "HORIZONTAL",
                            "itemSpacing": 8,
                            "paddingLeft": 16,
                            "paddingRight": 16,
                            "paddingTop": 8,
                            "paddingBottom": 8,
                            "cornerRadius": 8,
                            "fills": [
                                {"type": "SOLID", "color": {"r": 0, "g": 0.478, "b": 1, "a": 1}},
                            ],
                            "strokeWeight": 1,
                            "children": [
                                {
                                    "id": "1:2",
                                    "name": "Label",
                                    "type": "TEXT",
                                    "style": {
                                        "fontFamily": "Inter",
                                        "fontSize": 14,
                                        "fontWeight": 600,
                                        "lineHeightPx": 20,
                                    },
                                },
                            ],
                        },
                        {
                            "id": "2:1",
                            "name": "Size",
                            "type": "COMPONENT_SET",
                            "componentPropertyDefinitions": {
                                "Size": {
                                    "type": "VARIANT",
                                    "defaultValue": "md",
                                    "variantOptions": ["sm", "md", "lg"],
                                },
                            },
                            "children": [],
                        },
                    ],
                },
            ],
        },
        "components": {
            "1:1": {"key": "btn-key", "name": "Button", "description": "Primary action"},
        },
        "componentSets": {
            "2:1": {"key": "size-key", "name": "Size"},
        },
        "styles": {},
    }


@pytest.fixture
def empty_styles_data() -> Dict[str, Any]:
    return {"meta": {"styles": []}}


@pytest.fixture
def empty_components_data() -> Dict[str, Any]:
    return {"meta": {"components": []}}


@pytest.fixture
def empty_variables_data() -> Dict[str, Any]:
    return {"meta": {"variables": {}, "variableCollections": {}}}


# ---------------------------------------------------------------------------
# FastAPI test client
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def api_client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI routes."""
    from app.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
