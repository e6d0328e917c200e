"""Pytest configuration for field_consolidator tests.

This module provides:
- A representative Figma document tree (raw JSON shape)
- Helpers to build an ``httpx.Client`` backed by ``httpx.MockTransport``
- Small CSV fixtures for the DB mapping and computed fields uploads
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
import pytest
from dotenv import load_dotenv

if TYPE_CHECKING:
    from collections.abc import Callable

# Load environment variables from project .env so FIGMA_API_TOKEN is available in tests
PROJECT_ROOT = Path(__file__).parent.parent
load_dotenv(PROJECT_ROOT / ".env")


@pytest.fixture
def sample_document() -> dict[str, Any]:
    """Figma node document with frames, groups, decorative layers and fields."""
    return {
        "id": "1:1",
        "name": "Benefits Config",
        "type": "CANVAS",
        "children": [
            {
                "id": "2:1",
                "name": "Account Settings",
                "type": "FRAME",
                "children": [
                    {"id": "3:1", "name": "Delete Confirmation", "type": "TEXT"},
                    {
                        "id": "3:2",
                        "name": "Profile",
                        "type": "GROUP",
                        "children": [
                            {"id": "4:1", "name": "Email", "type": "TEXT"},
                            {"id": "4:2", "name": "_divider", "type": "RECTANGLE"},
                            {"id": "4:3", "name": "Edit Phone", "type": "INSTANCE"},
                        ],
                    },
                    {
                        "id": "3:3",
                        "name": "Inner Frame",
                        "type": "FRAME",
                        "children": [
                            {"id": "5:1", "name": "Deductible", "type": "TEXT"},
                        ],
                    },
                ],
            },
            {"id": "2:2", "name": "   ", "type": "TEXT"},
            {"id": "2:3", "name": "Create Plan Button", "type": "INSTANCE"},
        ],
    }


@pytest.fixture
def nodes_response(sample_document: dict[str, Any]) -> Callable[[str], dict[str, Any]]:
    """Build a ``/files/:key/nodes`` response body wrapping ``sample_document``."""

    def _build(node_id: str) -> dict[str, Any]:
        return {"name": "Benefits", "nodes": {node_id: {"document": sample_document}}}

    return _build


@pytest.fixture
def mock_client_factory() -> Callable[..., httpx.Client]:
    """Create an ``httpx.Client`` whose requests are answered by ``handler``."""

    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(handler))

    return _factory


@pytest.fixture
def db_mapping_csv(tmp_path: Path) -> Path:
    """DB mapping upload using the ``Field Name`` / ``DB Column`` spellings."""
    path = tmp_path / "db_mapping.csv"
    path.write_text(
        "Field Name,DB Column\n"
        "email,users.email\n"
        "Delete Confirmation,accounts.delete_flag\n"
        "Deductible,plans.deductible\n"
        "Orphan,\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def computed_fields_csv(tmp_path: Path) -> Path:
    """Computed fields upload using the ``name`` / ``logic`` spellings."""
    path = tmp_path / "computed.csv"
    path.write_text(
        "name,logic\n"
        "Deductible,base_deductible * tier_factor\n",
        encoding="utf-8",
    )
    return path
