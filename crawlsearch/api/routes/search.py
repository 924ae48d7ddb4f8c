"""Document search route."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from loguru import logger
from pydantic import BaseModel, Field

from crawlsearch.api.deps import get_store
from crawlsearch.infra.store.redis_store import RedisStore

router = APIRouter(tags=["search"])


class SearchRequest(BaseModel):
    term: str = Field(min_length=1, max_length=512)


@router.put("/search", status_code=201)
async def api_search(req: SearchRequest, store: RedisStore = Depends(get_store)):
    """Full-text search over crawled text; returns the matching document URLs."""
    term = req.term.strip()
    logger.info("app - PUT /search {}", term)
    docs = await store.search(term)
    return {"docs": docs}
