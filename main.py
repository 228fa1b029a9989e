"""
Zeno Knows - FastAPI Application
Version: 1.0

Main entry point: loads taxonomy and tool data at startup.
"""

import os
import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Configure structured logging FIRST (before any other imports)
from services.logging_config import LogTimer, bind_request_context, configure_logging, get_logger, get_trace_id

APP_ENV = os.getenv("APP_ENV", "development")
configure_logging(
    json_format=APP_ENV == "production",
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    version=os.getenv("APP_VERSION", "1.0.0"),
    environment=APP_ENV
)

logger = get_logger(__name__)

from config import get_settings
from security import CURATOR_KEY_HEADER
from services.config_store import ConfigStore
from services.knowledge_base import KnowledgeBase
from services.metrics import get_metrics, record_request, set_app_info
from services.taxonomy import TaxonomyLoader

settings = get_settings()


async def connect_redis():
    """Connect to Redis if configured. Returns None when unavailable."""
    if not settings.redis_enabled:
        logger.info("REDIS_URL not set - config store disabled")
        return None

    try:
        client = aioredis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            max_connections=settings.REDIS_MAX_CONNECTIONS
        )
        await client.ping()
        logger.info("Redis connected")
        return client
    except Exception as e:
        logger.warning(f"Redis connection failed, continuing without config store: {e}")
        return None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}...")

    # 1. Redis (optional)
    redis_client = await connect_redis()
    app.state.redis = redis_client
    app.state.config_store = ConfigStore(redis_client) if redis_client else None

    # 2. Knowledge base
    knowledge_base = KnowledgeBase(
        config_store=app.state.config_store,
        loader=TaxonomyLoader(timeout=settings.TAXONOMY_FETCH_TIMEOUT)
    )
    with LogTimer(logger, "Knowledge base load", tools_path=settings.TOOLS_DATA_PATH):
        await knowledge_base.initialize(
            taxonomy_source=settings.TAXONOMY_SOURCE,
            tools_path=settings.TOOLS_DATA_PATH,
            taxonomy_from_redis=settings.TAXONOMY_FROM_REDIS
        )
    app.state.knowledge_base = knowledge_base

    if knowledge_base.catalog.is_fallback:
        logger.warning("Running with fallback taxonomy", source=settings.TAXONOMY_SOURCE)

    report = knowledge_base.consistency_report()
    if not report.is_consistent:
        logger.warning("Taxonomy does not declare all values used by tools", **report.to_dict())

    # 3. Metrics
    set_app_info(version=settings.APP_VERSION, environment=settings.APP_ENV)

    logger.info("Application ready!")

    yield

    logger.info("Shutting down...")
    if app.state.redis is not None:
        await app.state.redis.aclose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="AI tool knowledge base: catalogue, search and curation",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None
)

# Public read API; curator writes authenticate by header, not cookies
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "X-Trace-ID", CURATOR_KEY_HEADER],
    expose_headers=["X-Trace-ID"],
)


@app.middleware("http")
async def trace_id_middleware(request: Request, call_next):
    """Attach a trace ID to each request and record request metrics."""
    trace_id = request.headers.get("X-Trace-ID") or str(uuid.uuid4())[:8]
    bind_request_context(trace_id, method=request.method, path=request.url.path)
    start = time.perf_counter()

    response = await call_next(request)

    route = request.scope.get("route")
    endpoint = getattr(route, "path", request.url.path)
    record_request(request.method, endpoint, response.status_code, time.perf_counter() - start)

    response.headers["X-Trace-ID"] = trace_id
    logger.info("Request completed", status_code=response.status_code)
    return response


from routers.catalog import router as catalog_router
from routers.config import router as config_router

app.include_router(catalog_router, prefix="/api", tags=["catalog"])
app.include_router(config_router, prefix="/api", tags=["config"])


@app.get("/health/live")
async def liveness_check():
    """Liveness probe - process is up. No dependency checks."""
    return {"status": "alive"}


@app.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness probe - catalog loaded (Redis reported but not required)."""
    knowledge_base = getattr(request.app.state, "knowledge_base", None)
    config_store = getattr(request.app.state, "config_store", None)

    checks = {
        "status": "ready",
        "version": settings.APP_VERSION,
        "tools": 0,
        "taxonomy": "missing",
        "redis": "disabled",
    }

    if config_store is not None:
        checks["redis"] = "connected" if await config_store.ping() else "disconnected"

    if knowledge_base is None or not knowledge_base.is_ready:
        checks["status"] = "not_ready"
        return JSONResponse(status_code=503, content=checks)

    checks["tools"] = knowledge_base.store.count()
    checks["stats"] = knowledge_base.stats()
    checks["taxonomy"] = "fallback" if knowledge_base.catalog.is_fallback else knowledge_base.catalog.config.version
    return checks


@app.get("/")
async def root(request: Request):
    knowledge_base = getattr(request.app.state, "knowledge_base", None)
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "tools": knowledge_base.store.count() if knowledge_base else 0,
        "docs": app.docs_url,
    }


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return get_metrics()


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "trace_id": get_trace_id()}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=settings.DEBUG
    )
