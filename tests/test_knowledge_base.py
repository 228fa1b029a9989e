"""
Tests for KnowledgeBase facade
Version: 1.0
"""

import json
from datetime import date, datetime, timedelta, timezone

import pytest
import pytest_asyncio

from services.config_store import ConfigStore
from services.knowledge_base import KnowledgeBase, read_tool_records, sort_tools
from services.tool_contracts import FilterState, Tool


@pytest.fixture
def files(tmp_path, taxonomy_document, sample_tool_records):
    taxonomy_path = tmp_path / "taxonomy.json"
    taxonomy_path.write_text(json.dumps(taxonomy_document), encoding="utf-8")

    data_path = tmp_path / "data.json"
    data_path.write_text(json.dumps({"tools": sample_tool_records}), encoding="utf-8")
    return taxonomy_path, data_path


@pytest_asyncio.fixture
async def kb(files):
    taxonomy_path, data_path = files
    kb = KnowledgeBase()
    await kb.initialize(str(taxonomy_path), str(data_path))
    return kb


class TestReadToolRecords:

    def test_wrapped_and_bare_lists(self, tmp_path):
        wrapped = tmp_path / "wrapped.json"
        wrapped.write_text('{"tools": [{"id": "1"}]}', encoding="utf-8")
        bare = tmp_path / "bare.json"
        bare.write_text('[{"id": "2"}]', encoding="utf-8")

        assert read_tool_records(str(wrapped)) == [{"id": "1"}]
        assert read_tool_records(str(bare)) == [{"id": "2"}]

    def test_missing_file(self, tmp_path):
        assert read_tool_records(str(tmp_path / "missing.json")) == []


class TestSortTools:

    def test_orders(self, sample_tools):
        assert sort_tools(sample_tools, "relevance") == sample_tools
        assert [t.id for t in sort_tools(sample_tools, "title")] == ["t1", "t2", "t3"]
        assert [t.id for t in sort_tools(sample_tools, "last_updated")] == ["t2", "t1", "t3"]

    def test_unknown_order(self, sample_tools):
        with pytest.raises(ValueError):
            sort_tools(sample_tools, "popularity")


class TestKnowledgeBase:

    @pytest.mark.asyncio
    async def test_initialize(self, kb):
        assert kb.is_ready
        assert kb.store.count() == 3
        assert kb.catalog.is_fallback is False
        assert kb.catalog.config.version == "2.0.0"

    @pytest.mark.asyncio
    async def test_initialize_with_bad_taxonomy_uses_fallback(self, tmp_path, files):
        _, data_path = files
        kb = KnowledgeBase()
        await kb.initialize(str(tmp_path / "missing.json"), str(data_path))

        assert kb.is_ready
        assert kb.catalog.is_fallback
        assert kb.store.count() == 3

    @pytest.mark.asyncio
    async def test_query(self, kb):
        result = kb.query(FilterState(function_groups=["content"]))
        assert [t.id for t in result] == ["t1"]

        result = kb.query(FilterState(search_term="brand"), sort="relevance")
        # title hit first, description hit second
        assert [t.id for t in result] == ["t1", "t2"]

    @pytest.mark.asyncio
    async def test_query_new_this_week(self, kb):
        fresh = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
        await kb.create_tool(Tool(id="fresh", title="Fresh", type="Doc", date_added=fresh))

        assert [t.id for t in kb.query(FilterState(), new_this_week=True)] == ["fresh"]

    @pytest.mark.asyncio
    async def test_library_search(self, kb):
        assert [t.id for t in kb.search_library("gpt")] == ["t1", "t3"]

    @pytest.mark.asyncio
    async def test_views(self, kb):
        assert [t.id for t in kb.featured_tools(6)] == ["t1"]
        assert [t.id for t in kb.recent_tools(1)] == ["t1"]
        assert kb.filter_options().function_groups == ["content", "media"]
        assert {c.title for c in kb.categories()} == {"AI Assistants", "Platforms", "Documentation"}
        assert kb.consistency_report().ungrouped_functions == ["Research & Analysis"]

    @pytest.mark.asyncio
    async def test_schedule_views(self, kb):
        await kb.update_tool("t1", {"scheduled_feature_date": "2025-02-03T09:00:00Z"})
        await kb.update_tool("t3", {"scheduled_feature_date": "2025-02-01"})

        assert [t.id for t in kb.scheduled_tools()] == ["t3", "t1"]
        assert [t.id for t in kb.todays_featured_tools(date(2025, 2, 3))] == ["t1"]
        assert kb.todays_featured_tools(date(2025, 2, 2)) == []
        assert kb.stats()["total_tools"] == 3

    @pytest.mark.asyncio
    async def test_crud_without_redis(self, kb):
        await kb.create_tool(Tool(id="n", title="New", type="GPT"))
        await kb.update_tool("n", {"featured": True})
        assert kb.get_tool("n").featured is True

        await kb.delete_tool("n")
        assert kb.get_tool("n") is None


class TestKnowledgeBaseRedis:

    @pytest.mark.asyncio
    async def test_tools_loaded_from_redis_first(self, dict_redis, files):
        taxonomy_path, data_path = files
        dict_redis.storage["data-config"] = json.dumps({
            "tools": [{"id": "r1", "title": "From Redis", "type": "Doc"}]
        })
        kb = KnowledgeBase(config_store=ConfigStore(dict_redis))
        await kb.initialize(str(taxonomy_path), str(data_path))

        assert [t.id for t in kb.list_tools()] == ["r1"]

    @pytest.mark.asyncio
    async def test_taxonomy_from_redis(self, dict_redis, files, taxonomy_document):
        taxonomy_path, data_path = files
        taxonomy_document["version"] = "9.9.9"
        dict_redis.storage["taxonomy-config"] = json.dumps(taxonomy_document)

        kb = KnowledgeBase(config_store=ConfigStore(dict_redis))
        await kb.initialize(str(taxonomy_path), str(data_path), taxonomy_from_redis=True)

        assert kb.catalog.config.version == "9.9.9"

    @pytest.mark.asyncio
    async def test_writes_persist_to_redis(self, dict_redis, files):
        taxonomy_path, data_path = files
        dict_redis.storage["data-config"] = json.dumps({"tools": [], "meta": {"source": "sheet"}})
        kb = KnowledgeBase(config_store=ConfigStore(dict_redis))
        await kb.initialize(str(taxonomy_path), str(data_path))

        await kb.create_tool(Tool(id="n", title="New", type="GPT"))

        saved = json.loads(dict_redis.storage["data-config"])
        assert [t["id"] for t in saved["tools"]] == ["n"]
        assert saved["meta"] == {"source": "sheet"}
