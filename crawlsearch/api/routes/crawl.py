"""Crawl task routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from loguru import logger
from pydantic import BaseModel, Field

from crawlsearch.api.deps import get_registry, get_store
from crawlsearch.errors import TaskNotFoundError
from crawlsearch.infra.store.redis_store import RedisStore
from crawlsearch.jobs.registry import TaskRegistry

router = APIRouter(tags=["crawl"])


class CrawlRequest(BaseModel):
    fqdn: str = Field(min_length=1, max_length=253)


@router.post("/crawl", status_code=201)
async def api_start_crawl(req: CrawlRequest, registry: TaskRegistry = Depends(get_registry)):
    """Start a background crawl of `fqdn` and return its task id immediately."""
    fqdn = req.fqdn.strip()
    logger.info("app - POST /crawl {}", fqdn)
    task_id = registry.launch(fqdn)
    return {"taskID": task_id}


@router.get("/status/tasks/{task_id}")
async def api_task_status(task_id: str, store: RedisStore = Depends(get_store)):
    """Poll the status record of a crawl task."""
    logger.info("app - GET /status/tasks/{}", task_id)
    status = await store.get_task(task_id)
    if not status:
        raise TaskNotFoundError(task_id)
    return status
