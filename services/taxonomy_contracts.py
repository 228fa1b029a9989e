"""
Taxonomy Contracts - Pydantic models for the classification schema
Version: 1.0

Mirrors the taxonomy.json document (camelCase keys on the wire).
Loaded once per session and treated as read-only.
"""

from datetime import datetime, timezone
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_COLOR = "#6B7280"

DEFAULT_SEARCH_WEIGHTS: Dict[str, int] = {
    "title": 3,
    "description": 2,
    "function": 2,
    "tags": 1,
    "type": 1,
    "tier": 1,
}


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TypeConfig(_WireModel):
    id: str
    label: str
    icon: str = ""
    color: str = DEFAULT_COLOR


class TierConfig(_WireModel):
    id: str
    label: str
    color: str = DEFAULT_COLOR
    description: str = ""


class ComplexityConfig(_WireModel):
    id: str
    label: str
    color: str = DEFAULT_COLOR


class TaxonomyStructure(_WireModel):
    types: List[TypeConfig] = Field(default_factory=list)
    tiers: List[TierConfig] = Field(default_factory=list)
    complexity: List[ComplexityConfig] = Field(default_factory=list)


class FunctionGroup(_WireModel):
    """Named bucket of function labels."""
    name: str
    icon: str = ""
    color: str = DEFAULT_COLOR
    functions: List[str] = Field(default_factory=list)


class FunctionCategories(_WireModel):
    groups: Dict[str, FunctionGroup] = Field(default_factory=dict)


class TagCategory(_WireModel):
    name: str
    color: str = DEFAULT_COLOR
    tags: List[str] = Field(default_factory=list)


class SearchConfig(_WireModel):
    searchable_fields: List[str] = Field(
        default_factory=lambda: ["title", "description", "function", "tags"],
        alias="searchableFields"
    )
    weightings: Dict[str, float] = Field(
        default_factory=lambda: {"title": 3, "description": 2, "function": 2, "tags": 1}
    )

    def weight_for(self, field: str) -> float:
        """Configured weight, or the field default when missing or zero."""
        return self.weightings.get(field) or DEFAULT_SEARCH_WEIGHTS.get(field, 1)


class TaxonomyConfig(_WireModel):
    """Whole taxonomy document."""
    version: str = "1.0.0"
    last_updated: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        alias="lastUpdated"
    )
    structure: TaxonomyStructure = Field(default_factory=TaxonomyStructure)
    function_categories: FunctionCategories = Field(
        default_factory=FunctionCategories,
        alias="functionCategories"
    )
    tag_categories: Dict[str, TagCategory] = Field(default_factory=dict, alias="tagCategories")
    search_config: SearchConfig = Field(default_factory=SearchConfig, alias="searchConfig")

    def to_document(self) -> dict:
        """Serialize back to the camelCase JSON shape."""
        return self.model_dump(by_alias=True, mode="json")


def build_fallback_taxonomy() -> TaxonomyConfig:
    """
    Built-in minimal schema used when the real taxonomy can't be loaded.

    Five core types, three tiers, three complexity levels and no
    function groups or tag categories.
    """
    return TaxonomyConfig(
        version="1.0.0",
        structure=TaxonomyStructure(
            types=[
                TypeConfig(id="GPT", label="GPT", icon="🤖", color="#3B82F6"),
                TypeConfig(id="Platform", label="Platform", icon="🌐", color="#10B981"),
                TypeConfig(id="Tool", label="Tool", icon="🔧", color="#F59E0B"),
                TypeConfig(id="Doc", label="Document", icon="📄", color="#6B7280"),
                TypeConfig(id="Video", label="Video", icon="🎥", color="#EF4444"),
            ],
            tiers=[
                TierConfig(id="Foundation", label="Foundation", color="#10B981", description="Open access"),
                TierConfig(id="Specialist", label="Specialist", color="#F59E0B", description="Requires consultation"),
                TierConfig(id="Restricted", label="Restricted", color="#DC2626", description="Approval required"),
            ],
            complexity=[
                ComplexityConfig(id="Beginner", label="Beginner", color="#10B981"),
                ComplexityConfig(id="Intermediate", label="Intermediate", color="#F59E0B"),
                ComplexityConfig(id="Advanced", label="Advanced", color="#DC2626"),
            ],
        ),
        function_categories=FunctionCategories(groups={}),
        tag_categories={},
        search_config=SearchConfig(
            searchable_fields=["title", "description", "function", "tags"],
            weightings={"title": 3, "description": 2, "function": 2, "tags": 1},
        ),
    )
