"""
Pydantic Schemas
Version: 1.0

HTTP response shapes.
NO DEPENDENCIES on services.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ToolListResponse(BaseModel):
    tools: List[Dict[str, Any]] = Field(default_factory=list)
    count: int = 0
    total: int = 0
    filters: List[str] = Field(default_factory=list, description="Human-readable active filters")


class DisplayDates(BaseModel):
    """Last-updated date of a tool, pre-formatted for the detail view."""
    iso: str
    label: str
    relative: str


class ToolResponse(BaseModel):
    success: bool = True
    tool: Dict[str, Any]
    updated: Optional[DisplayDates] = None


class StatusResponse(BaseModel):
    success: bool = True
    detail: Optional[str] = None


class TaxonomyResponse(BaseModel):
    taxonomy: Dict[str, Any]
    is_fallback: bool = False
    load_error: Optional[str] = None


class ConsistencyResponse(BaseModel):
    consistent: bool
    issue_count: int
    undeclared_types: List[str] = Field(default_factory=list)
    undeclared_tiers: List[str] = Field(default_factory=list)
    undeclared_complexity: List[str] = Field(default_factory=list)
    ungrouped_functions: List[str] = Field(default_factory=list)
