"""Service status routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from crawlsearch.api.deps import get_registry, get_store
from crawlsearch.infra.store.redis_store import RedisStore
from crawlsearch.jobs.registry import TaskRegistry

router = APIRouter(tags=["system"])


@router.get("/")
async def app_status():
    return {"status": "app running"}


@router.get("/health")
async def health_check(
    store: RedisStore = Depends(get_store),
    registry: TaskRegistry = Depends(get_registry),
):
    return {
        "status": "ok",
        "redis": await store.ping(),
        "active_tasks": len(registry.active()),
    }


@router.get("/metrics")
async def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
