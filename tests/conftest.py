"""
Test Configuration and Fixtures
Version: 1.0
"""

import copy
from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest

from services.taxonomy import TaxonomyCatalog
from services.taxonomy_contracts import TaxonomyConfig
from services.tool_contracts import Tool


# ============================================================================
# MOCK FIXTURES
# ============================================================================

@pytest.fixture
def mock_redis():
    """Mock Redis client."""
    redis = MagicMock()
    redis.ping = AsyncMock(return_value=True)
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    redis.delete = AsyncMock(return_value=1)
    redis.aclose = AsyncMock()
    return redis


@pytest.fixture
def dict_redis(mock_redis):
    """Mock Redis client backed by a plain dict."""
    storage: Dict[str, str] = {}

    async def _get(key):
        return storage.get(key)

    async def _set(key, value):
        storage[key] = value
        return True

    async def _delete(key):
        return 1 if storage.pop(key, None) is not None else 0

    mock_redis.get = AsyncMock(side_effect=_get)
    mock_redis.set = AsyncMock(side_effect=_set)
    mock_redis.delete = AsyncMock(side_effect=_delete)
    mock_redis.storage = storage
    return mock_redis


# ============================================================================
# SAMPLE DATA FIXTURES
# ============================================================================

TAXONOMY_DOCUMENT: Dict[str, Any] = {
    "version": "2.0.0",
    "lastUpdated": "2025-01-15T09:00:00Z",
    "structure": {
        "types": [
            {"id": "GPT", "label": "GPT", "icon": "🤖", "color": "#3B82F6"},
            {"id": "Doc", "label": "Document", "icon": "📄", "color": "#6B7280"},
            {"id": "Platform", "label": "Platform", "icon": "🌐", "color": "#10B981"},
        ],
        "tiers": [
            {"id": "Foundation", "label": "Foundation", "color": "#10B981", "description": "Open access"},
            {"id": "Specialist", "label": "Specialist", "color": "#F59E0B", "description": "Requires consultation"},
        ],
        "complexity": [
            {"id": "Beginner", "label": "Beginner", "color": "#10B981"},
            {"id": "Advanced", "label": "Advanced", "color": "#DC2626"},
        ],
    },
    "functionCategories": {
        "groups": {
            "content": {
                "name": "Content & Creative",
                "icon": "✍️",
                "color": "#8B5CF6",
                "functions": ["Content & Creative", "Brand & Voice"],
            },
            "media": {
                "name": "Media & Communications",
                "icon": "📰",
                "color": "#EF4444",
                "functions": ["Media Relations"],
            },
        }
    },
    "tagCategories": {
        "ai": {"name": "AI & ML", "color": "#3B82F6", "tags": ["ai", "gpt"]},
        "development": {"name": "Development", "color": "#10B981", "tags": ["coding", "react", "ai"]},
    },
    "searchConfig": {
        "searchableFields": ["title", "description", "function", "tags"],
        "weightings": {"title": 3, "description": 2, "function": 2, "tags": 1},
    },
}


@pytest.fixture
def taxonomy_document() -> Dict[str, Any]:
    """Raw taxonomy.json document (camelCase keys)."""
    return copy.deepcopy(TAXONOMY_DOCUMENT)


@pytest.fixture
def taxonomy_config(taxonomy_document) -> TaxonomyConfig:
    return TaxonomyConfig.model_validate(taxonomy_document)


@pytest.fixture
def catalog(taxonomy_config) -> TaxonomyCatalog:
    return TaxonomyCatalog(taxonomy_config)


@pytest.fixture
def scenario_tools() -> List[Tool]:
    """The two-tool catalog used in the filter scenarios."""
    return [
        Tool(
            id="1",
            title="GPT-4 Code Assistant",
            tags=["coding", "ai"],
            type="GPT",
            tier="Specialist",
            function="Content & Creative",
            featured=True,
        ),
        Tool(
            id="2",
            title="React Docs",
            tags=["react", "frontend"],
            type="Doc",
            tier="Foundation",
            function="Best Practice Guides",
            featured=False,
        ),
    ]


@pytest.fixture
def sample_tool_records() -> List[Dict[str, Any]]:
    """Raw tool records as found in data.json."""
    return [
        {
            "id": "t1",
            "title": "Brand Voice GPT",
            "type": "GPT",
            "link": "https://example.com/brand-voice",
            "description": "Rewrites copy in the brand voice",
            "tier": "Foundation",
            "complexity": "Beginner",
            "tags": ["ai", "copy"],
            "function": "Brand & Voice",
            "featured": True,
            "date_added": "2025-01-10T10:00:00Z",
        },
        {
            "id": "t2",
            "title": "Media List Builder",
            "type": "Platform",
            "url": "https://example.com/media-lists",
            "description": "Builds journalist lists for a brand campaign",
            "tier": "Specialist",
            "complexity": "Advanced",
            "tags": ["media"],
            "function": "Media Relations",
            "featured": False,
            "date_added": "2024-12-01T10:00:00Z",
            "date_modified": "2025-01-12T10:00:00Z",
        },
        {
            "id": "t3",
            "title": "Prompt Guide",
            "type": "Doc",
            "link": "https://example.com/prompt-guide",
            "description": "How to write prompts for GPT tools",
            "complexity": "Beginner",
            "tags": ["ai", "gpt"],
            "function": "Research & Analysis",
            "date_added": "2024-11-01T10:00:00Z",
            "owner_team": "Enablement",
        },
    ]


@pytest.fixture
def sample_tools(sample_tool_records) -> List[Tool]:
    return [Tool.model_validate(record) for record in sample_tool_records]


# ============================================================================
# ENVIRONMENT FIXTURES
# ============================================================================

@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set mock environment variables and reset the settings cache."""
    from config import get_settings

    env_vars = {
        "APP_ENV": "testing",
        "CURATOR_API_KEY": "test-curator-key",
        "TAXONOMY_SOURCE": "config/taxonomy.json",
    }

    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)

    get_settings.cache_clear()
    yield env_vars
    get_settings.cache_clear()
