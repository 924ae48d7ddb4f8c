"""Request-scoped accessors for application state."""
from __future__ import annotations

from fastapi import Request

from crawlsearch.infra.store.redis_store import RedisStore
from crawlsearch.jobs.registry import TaskRegistry


def get_store(request: Request) -> RedisStore:
    return request.app.state.store


def get_registry(request: Request) -> TaskRegistry:
    return request.app.state.registry
