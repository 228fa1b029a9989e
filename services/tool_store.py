"""
Tool Store - In-memory storage for catalog assets.
Version: 1.0

Single responsibility: store and retrieve Tool records by id,
keeping insertion order.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from services.date_utils import sort_by_date_added
from services.metrics import CATALOG_TOOLS
from services.tool_contracts import Tool

logger = logging.getLogger(__name__)


class ToolNotFoundError(KeyError):
    """No tool with the requested id."""


class DuplicateToolError(ValueError):
    """A tool with this id already exists."""


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ToolStore:
    """
    In-memory storage for tools.

    Responsibilities:
    - Store Tool objects by id (dict keeps insertion order)
    - Curator CRUD with date bookkeeping
    - Featured / recent / by-function lookups
    """

    def __init__(self):
        self.tools: Dict[str, Tool] = {}
        logger.debug("ToolStore initialized")

    def load(self, records: List[Dict[str, Any]]) -> int:
        """
        Replace contents with parsed records.

        Invalid records are skipped with a warning. Returns number loaded.
        """
        self.tools.clear()
        skipped = 0
        for record in records:
            try:
                tool = Tool.model_validate(record)
            except ValueError as e:
                skipped += 1
                record_id = record.get('id', '?') if isinstance(record, dict) else '?'
                logger.warning(f"Skipping invalid tool record {record_id!r}: {e}")
                continue
            self.tools[tool.id] = tool

        if skipped:
            logger.warning(f"{skipped} tool record(s) skipped during load")
        CATALOG_TOOLS.set(len(self.tools))
        return len(self.tools)

    def add_tool(self, tool: Tool) -> Tool:
        """Add a new tool, stamping date_added / date_modified."""
        if tool.id in self.tools:
            raise DuplicateToolError(tool.id)

        now = _utc_now_iso()
        tool = tool.model_copy(update={
            "date_added": tool.date_added or now,
            "date_created": tool.date_created or now,
            "date_modified": now,
        })
        self.tools[tool.id] = tool
        CATALOG_TOOLS.set(len(self.tools))
        return tool

    def update_tool(self, tool_id: str, updates: Dict[str, Any]) -> Tool:
        """Merge updates into an existing tool and re-validate it."""
        current = self.tools.get(tool_id)
        if current is None:
            raise ToolNotFoundError(tool_id)

        updates = dict(updates)
        if "url" in updates and "link" not in updates:
            updates["link"] = updates.pop("url")

        record = current.to_record()
        record.update(updates)
        record["id"] = tool_id
        record["date_modified"] = _utc_now_iso()

        updated = Tool.model_validate(record)
        self.tools[tool_id] = updated
        return updated

    def remove_tool(self, tool_id: str) -> Tool:
        try:
            removed = self.tools.pop(tool_id)
        except KeyError:
            raise ToolNotFoundError(tool_id) from None
        CATALOG_TOOLS.set(len(self.tools))
        return removed

    def get_tool(self, tool_id: str) -> Optional[Tool]:
        return self.tools.get(tool_id)

    def has_tool(self, tool_id: str) -> bool:
        return tool_id in self.tools

    def list_tools(self) -> List[Tool]:
        return list(self.tools.values())

    def count(self) -> int:
        return len(self.tools)

    def get_featured_tools(self, limit: int) -> List[Tool]:
        return [t for t in self.tools.values() if t.featured][:limit]

    def get_recent_tools(self, limit: int) -> List[Tool]:
        return sort_by_date_added(self.list_tools())[:limit]

    def get_tools_by_function(self, function_name: str) -> List[Tool]:
        return [t for t in self.tools.values() if t.function == function_name]

    def to_records(self) -> List[Dict[str, Any]]:
        return [tool.to_record() for tool in self.tools.values()]

    def get_stats(self) -> Dict[str, int]:
        tools = self.tools.values()
        return {
            "total_tools": len(self.tools),
            "featured_tools": sum(1 for t in tools if t.featured),
            "open_access_tools": sum(1 for t in tools if t.is_open_access),
        }
