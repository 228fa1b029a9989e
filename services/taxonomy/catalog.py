"""
Taxonomy Catalog - Read-only views over the classification schema.
Version: 1.0

Single responsibility: lookups and derived facet options.
Construct one per session and inject it wherever it's needed.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from pydantic import BaseModel, Field

from services.metrics import record_taxonomy_load
from services.tool_contracts import Tool
from services.taxonomy_contracts import (
    DEFAULT_COLOR,
    ComplexityConfig,
    FunctionGroup,
    TagCategory,
    TaxonomyConfig,
    TierConfig,
    TypeConfig,
)
from .loader import TaxonomyLoader, TaxonomyLoadError, TaxonomySource

logger = logging.getLogger(__name__)


# Category tiles shown on the home page, keyed by tool type
CATEGORY_TILES: Dict[str, Dict[str, str]] = {
    "GPT": {"icon": "🤖", "title": "AI Assistants", "description": "Custom GPTs and AI tools for various tasks"},
    "Doc": {"icon": "📚", "title": "Documentation", "description": "Guides, templates, and reference materials"},
    "Video": {"icon": "🎥", "title": "Video Tutorials", "description": "Step-by-step video guides and tutorials"},
    "Script": {"icon": "⚡", "title": "Scripts & Tools", "description": "Automation scripts and utility tools"},
    "Platform": {"icon": "🌐", "title": "Platforms", "description": "AI platforms and enterprise tools"},
    "Tool": {"icon": "🔧", "title": "Tools", "description": "Specialized tools and applications"},
    "Learning Guide": {"icon": "📖", "title": "Learning Materials", "description": "Educational content and learning resources"},
}


class FilterOptions(BaseModel):
    """Facet values present in the data plus display configs."""
    types: List[str] = Field(default_factory=list)
    tiers: List[str] = Field(default_factory=list)
    complexity: List[str] = Field(default_factory=list)
    functions: List[str] = Field(default_factory=list)
    function_groups: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    type_config: List[TypeConfig] = Field(default_factory=list)
    tier_config: List[TierConfig] = Field(default_factory=list)
    complexity_config: List[ComplexityConfig] = Field(default_factory=list)
    function_group_config: Dict[str, FunctionGroup] = Field(default_factory=dict)
    tag_categories: Dict[str, TagCategory] = Field(default_factory=dict)


class Category(BaseModel):
    id: str
    icon: str
    title: str
    description: str
    count: int


def _distinct_sorted(values: Iterable[Optional[str]]) -> List[str]:
    return sorted({v for v in values if v})


class TaxonomyCatalog:
    """
    Holds one TaxonomyConfig and answers questions about it.

    Responsibilities:
    - Display metadata lookups (type / tier / complexity / tag colour)
    - Function-group expansion
    - Filter options derived from the actual tool collection
    """

    def __init__(
        self,
        config: TaxonomyConfig,
        is_fallback: bool = False,
        load_error: Optional[TaxonomyLoadError] = None
    ):
        self.config = config
        self.is_fallback = is_fallback
        self.load_error = load_error

    @classmethod
    async def load(
        cls,
        source: TaxonomySource,
        loader: Optional[TaxonomyLoader] = None
    ) -> "TaxonomyCatalog":
        """
        Load a catalog from source, substituting the built-in schema on failure.

        Never raises. Check is_fallback / load_error to see what happened.
        """
        loader = loader or TaxonomyLoader()
        result = await loader.load(source)

        if result.ok:
            record_taxonomy_load(success=True, fallback=False)
            return cls(result.config)

        logger.warning(f"Using fallback taxonomy ({result.error.kind})")
        record_taxonomy_load(success=False, fallback=True)
        return cls(result.unwrap_or_fallback(), is_fallback=True, load_error=result.error)

    # ═══════════════════════════════════════════════
    # DATA-DERIVED HELPERS
    # ═══════════════════════════════════════════════

    @staticmethod
    def extract_tags_from_tools(tools: Iterable[Tool]) -> List[str]:
        """All unique tags used across tools, sorted."""
        return _distinct_sorted(tag for tool in tools for tag in (tool.tags or []))

    @staticmethod
    def extract_functions_from_tools(tools: Iterable[Tool]) -> List[str]:
        """All unique function labels used across tools, sorted."""
        return _distinct_sorted(tool.function for tool in tools)

    def get_filter_options(self, tools: List[Tool]) -> FilterOptions:
        groups = self.get_function_groups()
        structure = self.config.structure

        return FilterOptions(
            types=_distinct_sorted(t.type for t in tools),
            tiers=_distinct_sorted(t.tier for t in tools),
            complexity=_distinct_sorted(t.complexity for t in tools),
            functions=self.extract_functions_from_tools(tools),
            function_groups=list(groups.keys()),
            tags=self.extract_tags_from_tools(tools),
            type_config=list(structure.types),
            tier_config=list(structure.tiers),
            complexity_config=list(structure.complexity),
            function_group_config=dict(groups),
            tag_categories=dict(self.config.tag_categories),
        )

    def get_categories(self, tools: List[Tool]) -> List[Category]:
        """Category tiles per known tool type, in first-seen order."""
        counts: Dict[str, int] = {}
        for tool in tools:
            counts[tool.type] = counts.get(tool.type, 0) + 1

        categories = []
        for tool_type, count in counts.items():
            tile = CATEGORY_TILES.get(tool_type)
            if tile:
                categories.append(Category(id=str(len(categories) + 1), count=count, **tile))
        return categories

    # ═══════════════════════════════════════════════
    # FUNCTION GROUPS
    # ═══════════════════════════════════════════════

    def get_function_groups(self) -> Dict[str, FunctionGroup]:
        return self.config.function_categories.groups

    def expand_function_groups(self, group_keys: Iterable[str]) -> Set[str]:
        """Union of member functions of the given groups. Unknown keys add nothing."""
        groups = self.get_function_groups()
        allowed: Set[str] = set()
        for key in group_keys:
            group = groups.get(key)
            if group:
                allowed.update(group.functions)
        return allowed

    def get_tools_by_function_group(self, tools: List[Tool], group_key: str) -> List[Tool]:
        group = self.get_function_groups().get(group_key)
        if not group:
            return []
        return [tool for tool in tools if tool.function in group.functions]

    # ═══════════════════════════════════════════════
    # DISPLAY LOOKUPS
    # ═══════════════════════════════════════════════

    def get_tag_color(self, tag: str) -> str:
        # First category wins when a tag is listed twice
        for category in self.config.tag_categories.values():
            if tag in category.tags:
                return category.color
        return DEFAULT_COLOR

    def get_type_config(self, tool_type: str) -> Optional[TypeConfig]:
        return next((t for t in self.config.structure.types if t.id == tool_type), None)

    def get_tier_config(self, tier: str) -> Optional[TierConfig]:
        return next((t for t in self.config.structure.tiers if t.id == tier), None)

    def get_complexity_config(self, complexity: str) -> Optional[ComplexityConfig]:
        return next((c for c in self.config.structure.complexity if c.id == complexity), None)
