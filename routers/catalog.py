"""
Catalog Router
Version: 1.0

Tool listing, search, curator CRUD and taxonomy views.
"""
import uuid
from typing import Any, Dict, List, Optional

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, status
from pydantic import ValidationError

from config import get_settings
from schemas import (
    ConsistencyResponse,
    DisplayDates,
    StatusResponse,
    TaxonomyResponse,
    ToolListResponse,
    ToolResponse,
)
from security import require_curator
from services.date_utils import display_date, format_date, format_relative_time
from services.knowledge_base import SORT_ORDERS, KnowledgeBase
from services.taxonomy import Category, FilterOptions
from services.tool_contracts import FilterState, Tool, ToolUpdate
from services.tool_store import DuplicateToolError, ToolNotFoundError

router = APIRouter()
logger = structlog.get_logger("catalog")


def get_knowledge_base(request: Request) -> KnowledgeBase:
    # Initialized in main.py lifespan
    return request.app.state.knowledge_base


def _records(tools: List[Tool]) -> List[Dict[str, Any]]:
    return [tool.to_record() for tool in tools]


# ═══════════════════════════════════════════════
# TOOLS - READ
# ═══════════════════════════════════════════════

@router.get("/tools", response_model=ToolListResponse)
async def list_tools(
    search: str = Query(default=""),
    types: List[str] = Query(default=[]),
    tiers: List[str] = Query(default=[]),
    complexity: List[str] = Query(default=[]),
    functions: List[str] = Query(default=[]),
    function_groups: List[str] = Query(default=[]),
    tags: List[str] = Query(default=[]),
    featured: Optional[bool] = Query(default=None),
    sort: str = Query(default="relevance"),
    new_this_week: bool = Query(default=False),
    kb: KnowledgeBase = Depends(get_knowledge_base)
):
    """Filtered, ordered tool list."""
    if sort not in SORT_ORDERS:
        raise HTTPException(
            status_code=422,
            detail=f"sort must be one of {list(SORT_ORDERS)}"
        )

    filters = FilterState(
        search_term=search,
        types=types,
        tiers=tiers,
        complexity=complexity,
        functions=functions,
        function_groups=function_groups,
        tags=tags,
        featured=featured,
    )
    tools = kb.query(filters, sort=sort, new_this_week=new_this_week)

    logger.info(
        "Tools filtered",
        count=len(tools),
        total=kb.store.count(),
        active_filters=filters.has_active_filters
    )
    return ToolListResponse(
        tools=_records(tools),
        count=len(tools),
        total=kb.store.count(),
        filters=filters.summary(kb.catalog),
    )


@router.get("/tools/search", response_model=ToolListResponse)
async def search_library(
    q: str = Query(default=""),
    kb: KnowledgeBase = Depends(get_knowledge_base)
):
    """Plain title/description/tag search used by the library grid."""
    tools = kb.search_library(q)
    return ToolListResponse(tools=_records(tools), count=len(tools), total=kb.store.count())


@router.get("/tools/featured", response_model=ToolListResponse)
async def featured_tools(kb: KnowledgeBase = Depends(get_knowledge_base)):
    tools = kb.featured_tools(get_settings().FEATURED_TOOLS_LIMIT)
    return ToolListResponse(tools=_records(tools), count=len(tools), total=kb.store.count())


@router.get("/tools/recent", response_model=ToolListResponse)
async def recent_tools(kb: KnowledgeBase = Depends(get_knowledge_base)):
    tools = kb.recent_tools(get_settings().RECENT_TOOLS_LIMIT)
    return ToolListResponse(tools=_records(tools), count=len(tools), total=kb.store.count())


@router.get("/tools/this-week", response_model=ToolListResponse)
async def tools_this_week(kb: KnowledgeBase = Depends(get_knowledge_base)):
    tools = kb.top_tools_this_week(get_settings().RECENT_TOOLS_LIMIT)
    return ToolListResponse(tools=_records(tools), count=len(tools), total=kb.store.count())


@router.get("/tools/scheduled", response_model=ToolListResponse)
async def scheduled_tools(kb: KnowledgeBase = Depends(get_knowledge_base)):
    """Tools with a scheduled feature date, soonest first."""
    tools = kb.scheduled_tools()
    return ToolListResponse(tools=_records(tools), count=len(tools), total=kb.store.count())


@router.get("/tools/featured/today", response_model=ToolListResponse)
async def todays_featured_tools(kb: KnowledgeBase = Depends(get_knowledge_base)):
    tools = kb.todays_featured_tools()
    return ToolListResponse(tools=_records(tools), count=len(tools), total=kb.store.count())


@router.get("/tools/{tool_id}", response_model=ToolResponse)
async def get_tool(tool_id: str, kb: KnowledgeBase = Depends(get_knowledge_base)):
    tool = kb.get_tool(tool_id)
    if tool is None:
        raise HTTPException(status_code=404, detail="Tool not found")
    updated = display_date(tool)
    return ToolResponse(
        tool=tool.to_record(),
        updated=DisplayDates(iso=updated, label=format_date(updated), relative=format_relative_time(updated))
    )


# ═══════════════════════════════════════════════
# TOOLS - CURATOR WRITES
# ═══════════════════════════════════════════════

@router.post(
    "/tools",
    response_model=ToolResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_curator)]
)
async def create_tool(
    payload: Dict[str, Any] = Body(...),
    kb: KnowledgeBase = Depends(get_knowledge_base)
):
    record = dict(payload)
    if not record.get("id"):
        record["id"] = str(uuid.uuid4())

    try:
        tool = Tool.model_validate(record)
        created = await kb.create_tool(tool)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False))
    except DuplicateToolError:
        raise HTTPException(status_code=409, detail=f"Tool '{record['id']}' already exists")

    return ToolResponse(tool=created.to_record())


@router.put("/tools/{tool_id}", response_model=ToolResponse, dependencies=[Depends(require_curator)])
async def update_tool(
    tool_id: str,
    updates: ToolUpdate,
    kb: KnowledgeBase = Depends(get_knowledge_base)
):
    try:
        updated = await kb.update_tool(tool_id, updates.model_dump(exclude_unset=True))
    except ToolNotFoundError:
        raise HTTPException(status_code=404, detail="Tool not found")
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False))

    return ToolResponse(tool=updated.to_record())


@router.delete("/tools/{tool_id}", response_model=StatusResponse, dependencies=[Depends(require_curator)])
async def delete_tool(tool_id: str, kb: KnowledgeBase = Depends(get_knowledge_base)):
    try:
        await kb.delete_tool(tool_id)
    except ToolNotFoundError:
        raise HTTPException(status_code=404, detail="Tool not found")
    return StatusResponse()


# ═══════════════════════════════════════════════
# TAXONOMY
# ═══════════════════════════════════════════════

@router.get("/taxonomy", response_model=TaxonomyResponse)
async def get_taxonomy(kb: KnowledgeBase = Depends(get_knowledge_base)):
    catalog = kb.catalog
    return TaxonomyResponse(
        taxonomy=catalog.config.to_document(),
        is_fallback=catalog.is_fallback,
        load_error=catalog.load_error.message if catalog.load_error else None,
    )


@router.get("/taxonomy/filter-options", response_model=FilterOptions)
async def get_filter_options(kb: KnowledgeBase = Depends(get_knowledge_base)):
    return kb.filter_options()


@router.get("/taxonomy/categories", response_model=List[Category])
async def get_categories(kb: KnowledgeBase = Depends(get_knowledge_base)):
    return kb.categories()


@router.get("/taxonomy/consistency", response_model=ConsistencyResponse)
async def get_consistency(kb: KnowledgeBase = Depends(get_knowledge_base)):
    return ConsistencyResponse(**kb.consistency_report().to_dict())
