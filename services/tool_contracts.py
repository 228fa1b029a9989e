"""
Tool Contracts - Pydantic models for catalog assets and filter state
Version: 1.0

Tool records are the catalog entity. FilterState is the per-request
facet selection consumed by the filter engine.
NO business logic beyond small derived properties.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ToolType(str, Enum):
    """Known asset types. The field on Tool stays an open string."""
    GPT = "GPT"
    DOC = "Doc"
    SCRIPT = "Script"
    VIDEO = "Video"
    PLATFORM = "Platform"
    TOOL = "Tool"
    LEARNING_GUIDE = "Learning Guide"


class Tier(str, Enum):
    FOUNDATION = "Foundation"
    SPECIALIST = "Specialist"
    RESTRICTED = "Restricted"


class Complexity(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class Tool(BaseModel):
    """
    Single catalog asset (GPT, doc, script, video, platform...).

    Known attributes are typed fields. Anything else found in the source
    record is moved into `extra` so unknown columns never break parsing.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Opaque stable identifier")
    title: str
    type: str = Field(..., description="GPT | Doc | Script | Video | Platform | Tool | Learning Guide")
    link: str = Field(default="", description="Asset URL (accepted as 'url' too)")

    description: Optional[str] = None
    tier: Optional[str] = None
    complexity: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    function: Optional[str] = None
    featured: Optional[bool] = None

    date_added: Optional[str] = None
    date_created: Optional[str] = None
    date_modified: Optional[str] = None
    added_by: Optional[str] = None
    scheduled_feature_date: Optional[str] = None

    extra: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def collect_extra_fields(cls, data: Any) -> Any:
        """Map 'url' onto 'link' and park unknown keys in 'extra'."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        url = data.pop("url", None)
        if url and not data.get("link"):
            data["link"] = url

        if data.get("tags") is None:
            data.pop("tags", None)

        known = set(cls.model_fields)
        extra = dict(data.get("extra") or {})
        for key in list(data):
            if key not in known:
                extra[key] = data.pop(key)
        data["extra"] = extra
        return data

    @property
    def url(self) -> str:
        return self.link

    @property
    def last_updated(self) -> Optional[str]:
        """First non-empty of date_modified / date_created."""
        return self.date_modified or self.date_created or None

    @property
    def is_open_access(self) -> bool:
        """Absent tier counts as Foundation."""
        return not self.tier or self.tier == Tier.FOUNDATION.value

    def to_record(self) -> Dict[str, Any]:
        """Flat JSON record, extra fields merged back in."""
        record = self.model_dump(exclude={"extra"}, exclude_none=True)
        for key, value in self.extra.items():
            record.setdefault(key, value)
        return record


class ToolUpdate(BaseModel):
    """Partial update sent by the curator dashboard."""
    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    type: Optional[str] = None
    link: Optional[str] = None
    description: Optional[str] = None
    tier: Optional[str] = None
    complexity: Optional[str] = None
    tags: Optional[List[str]] = None
    function: Optional[str] = None
    featured: Optional[bool] = None
    scheduled_feature_date: Optional[str] = None


MULTI_SELECT_FACETS = ("types", "tiers", "complexity", "functions", "function_groups", "tags")


class FilterState(BaseModel):
    """
    Active search/facet selections.

    Empty list means "no constraint" for that facet.
    featured=None means "don't filter on featured status".
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    types: List[str] = Field(default_factory=list)
    tiers: List[str] = Field(default_factory=list)
    complexity: List[str] = Field(default_factory=list)
    functions: List[str] = Field(default_factory=list)
    function_groups: List[str] = Field(default_factory=list, alias="functionGroups")
    tags: List[str] = Field(default_factory=list)
    featured: Optional[bool] = None
    search_term: str = Field(default="", alias="searchTerm")

    @property
    def has_active_filters(self) -> bool:
        return (
            any(getattr(self, facet) for facet in MULTI_SELECT_FACETS)
            or self.featured is not None
            or self.search_term.strip() != ""
        )

    def toggle(self, key: str, value: str) -> "FilterState":
        """Return a new state with value added to / removed from a multi-select facet."""
        if key not in MULTI_SELECT_FACETS:
            raise ValueError(f"'{key}' is not a multi-select facet")

        current = list(getattr(self, key))
        if value in current:
            current = [v for v in current if v != value]
        else:
            current.append(value)
        return self.model_copy(update={key: current})

    def clear(self, key: Optional[str] = None) -> "FilterState":
        """Reset one facet, or every facet when key is None."""
        if key is None:
            return FilterState()
        if key in MULTI_SELECT_FACETS:
            return self.model_copy(update={key: []})
        if key == "featured":
            return self.model_copy(update={"featured": None})
        if key == "search_term":
            return self.model_copy(update={"search_term": ""})
        raise ValueError(f"Unknown filter key: {key}")

    def summary(self, catalog=None) -> List[str]:
        """Human-readable description of the active filters."""
        active = []

        if self.search_term:
            active.append(f'Search: "{self.search_term}"')
        if self.types:
            active.append(f"Types: {', '.join(self.types)}")
        if self.tiers:
            active.append(f"Tiers: {', '.join(self.tiers)}")
        if self.complexity:
            active.append(f"Complexity: {', '.join(self.complexity)}")
        if self.functions:
            active.append(f"Functions: {', '.join(self.functions)}")
        if self.function_groups:
            groups = catalog.get_function_groups() if catalog is not None else {}
            names = [groups[key].name if key in groups else key for key in self.function_groups]
            active.append(f"Groups: {', '.join(names)}")
        if self.tags:
            active.append(f"Tags: {', '.join(self.tags)}")
        if self.featured is not None:
            active.append(f"Featured: {'Yes' if self.featured else 'No'}")

        return active
