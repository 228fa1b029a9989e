"""
Search Ranker - Weighted keyword search over tool records.
Version: 1.0

Case-insensitive substring containment. No tokenization, stemming or
fuzzy matching. Ordering is "title hit first", stable otherwise.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from services.tool_contracts import Tool
from services.taxonomy_contracts import SearchConfig
from .catalog import TaxonomyCatalog

logger = logging.getLogger(__name__)

# Every field the ranker knows how to read, in scoring order
RANKED_FIELDS = ("title", "description", "function", "tags", "type", "tier")

# Fields the lightweight library search looks at
LOCAL_SEARCH_FIELDS = ("title", "description", "tags")


def field_contains(tool: Tool, field: str, term: str) -> bool:
    """
    True if the lower-cased field value contains term.

    term must already be lower-cased. Missing values never match.
    """
    if field == "tags":
        return any(term in tag.lower() for tag in (tool.tags or []))

    value = getattr(tool, field, None)
    if not value or not isinstance(value, str):
        return False
    return term in value.lower()


def matched_fields(tool: Tool, term: str, fields: Iterable[str] = RANKED_FIELDS) -> List[str]:
    return [field for field in fields if field_contains(tool, field, term)]


class SearchRanker:
    """
    Scores tools against a free-text term using taxonomy weightings.

    Responsibilities:
    - Per-field weighted scoring
    - Zero-score exclusion
    - Title-hit-first stable ordering
    """

    def __init__(self, catalog: Optional[TaxonomyCatalog] = None):
        self.catalog = catalog

    @property
    def search_config(self) -> SearchConfig:
        if self.catalog is None:
            return SearchConfig()
        return self.catalog.config.search_config

    def score(self, tool: Tool, term: str) -> float:
        """Sum of weights of fields containing term (term already lower-cased)."""
        config = self.search_config
        return sum(config.weight_for(field) for field in matched_fields(tool, term))

    def search(self, tools: Sequence[Tool], term: str) -> List[Tool]:
        """
        Return tools matching term, title hits first.

        An empty or whitespace-only term returns the input unchanged.
        """
        if not term or not term.strip():
            return list(tools)

        term = term.lower()
        matches = [tool for tool in tools if self.score(tool, term) > 0]

        # sorted() is stable: only the title-hit flag reorders
        ranked = sorted(matches, key=lambda tool: 0 if field_contains(tool, "title", term) else 1)

        logger.debug(f"Search '{term}': {len(ranked)}/{len(tools)} tools matched")
        return ranked


def local_search(tools: Sequence[Tool], query: str) -> List[Tool]:
    """
    Library-page search: title, description or tags contain query.

    No weighting, no reordering.
    """
    if not query or not query.strip():
        return list(tools)

    term = query.lower()
    return [tool for tool in tools if matched_fields(tool, term, LOCAL_SEARCH_FIELDS)]
