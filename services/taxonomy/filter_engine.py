"""
Filter Engine - Search plus structured facet filtering.
Version: 1.0

Steps run in a fixed order. Search establishes the ordering; every
later step is a stable filter that keeps relative order.
"""

import logging
import time
from typing import List, Optional, Sequence

from services.metrics import record_filter_run
from services.tool_contracts import FilterState, Tool
from .catalog import TaxonomyCatalog
from .search_ranker import SearchRanker

logger = logging.getLogger(__name__)


class FilterEngine:
    """
    Composes SearchRanker with facet predicates.

    Semantics per facet:
    - types / tiers / complexity / functions: IN (any selected value)
    - function groups: IN over the union of the groups' functions
    - tags: tool must carry every selected tag
    - featured: exact boolean match when not None
    """

    def __init__(self, catalog: TaxonomyCatalog, ranker: Optional[SearchRanker] = None):
        self.catalog = catalog
        self.ranker = ranker or SearchRanker(catalog)

    def apply(self, tools: Sequence[Tool], filters: FilterState) -> List[Tool]:
        start = time.perf_counter()
        filtered = list(tools)

        if filters.search_term:
            filtered = self.ranker.search(filtered, filters.search_term)

        if filters.types:
            filtered = [t for t in filtered if t.type in filters.types]

        if filters.tiers:
            filtered = [t for t in filtered if t.tier in filters.tiers]

        if filters.complexity:
            filtered = [t for t in filtered if t.complexity in filters.complexity]

        if filters.functions:
            filtered = [t for t in filtered if t.function in filters.functions]

        if filters.function_groups:
            allowed = self.catalog.expand_function_groups(filters.function_groups)
            filtered = [t for t in filtered if t.function in allowed]

        if filters.tags:
            filtered = [t for t in filtered if all(tag in (t.tags or []) for tag in filters.tags)]

        if filters.featured is not None:
            filtered = [t for t in filtered if t.featured is filters.featured]

        duration = time.perf_counter() - start
        record_filter_run(
            searched=bool(filters.search_term.strip()),
            result_count=len(filtered),
            duration_seconds=duration
        )
        logger.debug(
            f"Filters applied: {len(filtered)}/{len(tools)} tools "
            f"({round(duration * 1000, 2)}ms)"
        )
        return filtered
