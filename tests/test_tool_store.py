"""
Tests for ToolStore
Version: 1.0
"""

import pytest
from pydantic import ValidationError

from services.tool_contracts import Tool
from services.tool_store import DuplicateToolError, ToolNotFoundError, ToolStore


class TestToolStore:
    """Test in-memory tool storage."""

    @pytest.fixture
    def store(self, sample_tool_records):
        store = ToolStore()
        store.load(sample_tool_records)
        return store

    # ========================================================================
    # LOADING
    # ========================================================================

    def test_load_keeps_order(self, store):
        assert store.count() == 3
        assert [t.id for t in store.list_tools()] == ["t1", "t2", "t3"]

    def test_load_skips_invalid_records(self, sample_tool_records):
        store = ToolStore()
        count = store.load(sample_tool_records + [{"id": "broken"}, "not a record"])

        assert count == 3
        assert not store.has_tool("broken")

    def test_load_replaces_contents(self, store):
        store.load([{"id": "only", "title": "Only", "type": "Doc"}])
        assert [t.id for t in store.list_tools()] == ["only"]

    # ========================================================================
    # CRUD
    # ========================================================================

    def test_add_stamps_dates(self, store):
        created = store.add_tool(Tool(id="new", title="New", type="GPT"))

        assert created.date_added is not None
        assert created.date_created == created.date_added
        assert created.date_modified is not None
        assert store.get_tool("new") == created

    def test_add_keeps_existing_date_added(self, store):
        created = store.add_tool(Tool(id="new", title="New", type="GPT", date_added="2024-01-01"))
        assert created.date_added == "2024-01-01"

    def test_add_duplicate(self, store):
        with pytest.raises(DuplicateToolError):
            store.add_tool(Tool(id="t1", title="Again", type="GPT"))

    def test_update_merges_and_stamps(self, store):
        updated = store.update_tool("t1", {"title": "Renamed", "tags": ["ai"]})

        assert updated.title == "Renamed"
        assert updated.tags == ["ai"]
        assert updated.function == "Brand & Voice"
        assert updated.date_modified is not None
        assert store.get_tool("t1").title == "Renamed"

    def test_update_cannot_change_id(self, store):
        updated = store.update_tool("t1", {"id": "other"})
        assert updated.id == "t1"
        assert not store.has_tool("other")

    def test_update_keeps_extra_fields(self, store):
        updated = store.update_tool("t3", {"complexity": "Advanced"})
        assert updated.extra["owner_team"] == "Enablement"

    def test_update_url_replaces_link(self, store):
        updated = store.update_tool("t2", {"url": "https://example.com/new-lists"})

        assert updated.link == "https://example.com/new-lists"
        assert "url" not in updated.extra
        assert store.get_tool("t2").link == "https://example.com/new-lists"

    def test_update_link_wins_over_url(self, store):
        updated = store.update_tool("t2", {"link": "https://a.example", "url": "https://b.example"})
        assert updated.link == "https://a.example"

    def test_update_invalid_value(self, store):
        with pytest.raises(ValidationError):
            store.update_tool("t1", {"title": None})
        assert store.get_tool("t1").title == "Brand Voice GPT"

    def test_update_missing(self, store):
        with pytest.raises(ToolNotFoundError):
            store.update_tool("missing", {"title": "x"})

    def test_remove(self, store):
        removed = store.remove_tool("t2")

        assert removed.id == "t2"
        assert store.count() == 2
        with pytest.raises(ToolNotFoundError):
            store.remove_tool("t2")

    # ========================================================================
    # QUERIES
    # ========================================================================

    def test_featured(self, store):
        assert [t.id for t in store.get_featured_tools(5)] == ["t1"]
        assert store.get_featured_tools(0) == []

    def test_recent(self, store):
        assert [t.id for t in store.get_recent_tools(2)] == ["t1", "t2"]

    def test_by_function(self, store):
        assert [t.id for t in store.get_tools_by_function("Media Relations")] == ["t2"]

    def test_to_records(self, store):
        records = store.to_records()
        assert records[1]["link"] == "https://example.com/media-lists"
        assert records[2]["owner_team"] == "Enablement"

    def test_stats(self, store):
        assert store.get_stats() == {
            "total_tools": 3,
            "featured_tools": 1,
            "open_access_tools": 2,
        }
