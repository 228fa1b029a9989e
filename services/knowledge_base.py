"""
Knowledge Base - Public facade over the tool catalog.
Version: 1.0

Coordinates the tool store, the taxonomy catalog and the filter engine,
and persists curator edits to the Redis config store when one is wired.
"""

import asyncio
import json
import logging
import os
from datetime import date
from typing import Any, Dict, List, Optional

from services.config_store import ConfigStore
from services.date_utils import (
    get_scheduled_tools,
    get_todays_featured_tools,
    get_top_tools_this_week,
    is_new_this_week,
    sort_by_date_added,
    sort_by_last_updated,
)
from services.taxonomy import (
    Category,
    ConsistencyReport,
    FilterEngine,
    FilterOptions,
    TaxonomyCatalog,
    TaxonomyLoader,
    TaxonomySynchronizer,
    local_search,
)
from services.taxonomy_contracts import build_fallback_taxonomy
from services.tool_contracts import FilterState, Tool
from services.tool_store import ToolStore

logger = logging.getLogger(__name__)

SORT_ORDERS = ("relevance", "title", "date_added", "last_updated")


def sort_tools(tools: List[Tool], order: str) -> List[Tool]:
    """Re-order a result list. 'relevance' keeps engine order."""
    if order == "relevance":
        return tools
    if order == "title":
        return sorted(tools, key=lambda t: t.title.lower())
    if order == "date_added":
        return sort_by_date_added(tools)
    if order == "last_updated":
        return sort_by_last_updated(tools)
    raise ValueError(f"Unknown sort order '{order}', expected one of {SORT_ORDERS}")


def read_tool_records(path: str) -> List[Dict[str, Any]]:
    """Read data.json ({"tools": [...]} or a bare list). Missing file -> []."""
    if not os.path.exists(path):
        logger.warning(f"Tool data file not found: {path}")
        return []

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        return data.get("tools", [])
    return data


class KnowledgeBase:
    """
    Tool catalog with taxonomy-driven search.

    Architecture:
    1. Load taxonomy (Redis blob, file or URL) -> TaxonomyCatalog, fallback on failure
    2. Load tools (Redis data-config or data.json) -> ToolStore
    3. Queries run through FilterEngine; curator edits write back to Redis
    """

    def __init__(
        self,
        config_store: Optional[ConfigStore] = None,
        loader: Optional[TaxonomyLoader] = None
    ):
        self.config_store = config_store
        self._loader = loader or TaxonomyLoader()
        self._store = ToolStore()

        self.catalog = TaxonomyCatalog(build_fallback_taxonomy(), is_fallback=True)
        self.engine = FilterEngine(self.catalog)

        self.is_ready = False
        self._load_lock = asyncio.Lock()
        self._write_lock = asyncio.Lock()

    @property
    def store(self) -> ToolStore:
        return self._store

    # ═══════════════════════════════════════════════
    # INITIALIZATION
    # ═══════════════════════════════════════════════

    async def initialize(
        self,
        taxonomy_source: Any,
        tools_path: str,
        taxonomy_from_redis: bool = False
    ) -> bool:
        """
        Load taxonomy and tools.

        Returns True once the catalog is usable. A taxonomy failure never
        blocks startup; it only switches to the fallback schema.
        """
        async with self._load_lock:
            await self.load_taxonomy(taxonomy_source, from_redis=taxonomy_from_redis)
            count = await self.load_tools(tools_path)

            self.is_ready = True
            logger.info(
                f"Knowledge base ready: {count} tools, "
                f"taxonomy {'fallback' if self.catalog.is_fallback else self.catalog.config.version}"
            )
            return True

    async def load_taxonomy(self, source: Any, from_redis: bool = False) -> TaxonomyCatalog:
        if from_redis and self.config_store is not None:
            document = await self.config_store.get_config("taxonomy")
            if document is not None:
                source = document
            else:
                logger.warning("No taxonomy-config in Redis, using configured source")

        self.use_catalog(await TaxonomyCatalog.load(source, loader=self._loader))
        return self.catalog

    def use_catalog(self, catalog: TaxonomyCatalog) -> None:
        self.catalog = catalog
        self.engine = FilterEngine(catalog)

    async def load_tools(self, path: str) -> int:
        records = None
        if self.config_store is not None:
            data = await self.config_store.get_config("data")
            if isinstance(data, dict) and isinstance(data.get("tools"), list):
                records = data["tools"]
                logger.info(f"Loading {len(records)} tools from Redis data-config")

        if records is None:
            try:
                records = read_tool_records(path)
            except (OSError, ValueError) as e:
                logger.error(f"Failed to read tool data from {path}: {e}")
                records = []

        return self._store.load(records)

    # ═══════════════════════════════════════════════
    # QUERIES
    # ═══════════════════════════════════════════════

    def query(
        self,
        filters: FilterState,
        sort: str = "relevance",
        new_this_week: bool = False
    ) -> List[Tool]:
        tools = self.engine.apply(self._store.list_tools(), filters)
        if new_this_week:
            tools = [t for t in tools if is_new_this_week(t.date_added)]
        return sort_tools(tools, sort)

    def search_library(self, query: str) -> List[Tool]:
        return local_search(self._store.list_tools(), query)

    def get_tool(self, tool_id: str) -> Optional[Tool]:
        return self._store.get_tool(tool_id)

    def list_tools(self) -> List[Tool]:
        return self._store.list_tools()

    def featured_tools(self, limit: int) -> List[Tool]:
        return self._store.get_featured_tools(limit)

    def recent_tools(self, limit: int) -> List[Tool]:
        return self._store.get_recent_tools(limit)

    def top_tools_this_week(self, limit: int) -> List[Tool]:
        return get_top_tools_this_week(self._store.list_tools(), limit)

    def scheduled_tools(self) -> List[Tool]:
        return get_scheduled_tools(self._store.list_tools())

    def todays_featured_tools(self, today: Optional[date] = None) -> List[Tool]:
        """Tools whose scheduled feature date falls on today (UTC)."""
        return get_todays_featured_tools(self._store.list_tools(), today)

    def stats(self) -> Dict[str, int]:
        return self._store.get_stats()

    def filter_options(self) -> FilterOptions:
        return self.catalog.get_filter_options(self._store.list_tools())

    def categories(self) -> List[Category]:
        return self.catalog.get_categories(self._store.list_tools())

    def consistency_report(self) -> ConsistencyReport:
        return TaxonomySynchronizer(self.catalog.config).find_inconsistencies(self._store.list_tools())

    # ═══════════════════════════════════════════════
    # CURATOR WRITES
    # ═══════════════════════════════════════════════

    async def create_tool(self, tool: Tool) -> Tool:
        async with self._write_lock:
            created = self._store.add_tool(tool)
            await self._persist()
        logger.info(f"Tool created: {created.id}")
        return created

    async def update_tool(self, tool_id: str, updates: Dict[str, Any]) -> Tool:
        async with self._write_lock:
            updated = self._store.update_tool(tool_id, updates)
            await self._persist()
        logger.info(f"Tool updated: {tool_id}")
        return updated

    async def delete_tool(self, tool_id: str) -> Tool:
        async with self._write_lock:
            removed = self._store.remove_tool(tool_id)
            await self._persist()
        logger.info(f"Tool deleted: {tool_id}")
        return removed

    async def _persist(self) -> bool:
        if self.config_store is None:
            return False

        data = await self.config_store.get_config("data")
        if not isinstance(data, dict):
            data = {}
        data["tools"] = self._store.to_records()

        saved = await self.config_store.set_config("data", data)
        if not saved:
            logger.warning("Tool changes kept in memory only (Redis write failed)")
        return saved
