"""
Config Router
Version: 1.0

Read / replace / delete the Redis config blobs (app, content, data, taxonomy).
"""
from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Request

from schemas import StatusResponse
from security import require_curator
from services.config_store import CONFIG_KEYS, ConfigStore

router = APIRouter()
logger = structlog.get_logger("config")


def get_config_store(request: Request) -> ConfigStore:
    store = getattr(request.app.state, "config_store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Config store not available")
    return store


def _check_type(config_type: str) -> None:
    if config_type not in CONFIG_KEYS:
        raise HTTPException(status_code=404, detail=f"Unknown config type '{config_type}'")


@router.get("/config/{config_type}")
async def read_config(config_type: str, store: ConfigStore = Depends(get_config_store)) -> Any:
    _check_type(config_type)
    return await store.get_config(config_type)


@router.post("/config/{config_type}", response_model=StatusResponse, dependencies=[Depends(require_curator)])
async def write_config(
    config_type: str,
    body: Any = Body(...),
    store: ConfigStore = Depends(get_config_store)
):
    _check_type(config_type)
    if not await store.set_config(config_type, body):
        raise HTTPException(status_code=502, detail="Config write failed")

    logger.info("Config replaced", config_type=config_type)
    return StatusResponse(detail="Restart or reload to apply" if config_type in ("data", "taxonomy") else None)


@router.delete("/config/{config_type}", response_model=StatusResponse, dependencies=[Depends(require_curator)])
async def delete_config(config_type: str, store: ConfigStore = Depends(get_config_store)):
    _check_type(config_type)
    if not await store.delete_config(config_type):
        raise HTTPException(status_code=502, detail="Config delete failed")

    logger.info("Config deleted", config_type=config_type)
    return StatusResponse()
