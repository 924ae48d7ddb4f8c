"""Correlation ids for API requests and the crawl tasks they launch.

Tasks started while a request is being handled copy the current context, so
their log lines carry the id of the request that launched them.
"""
from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import Any

CORRELATION_HEADER = "X-Correlation-ID"

_REQUEST_CORRELATION_ID: ContextVar[str] = ContextVar("crawlsearch_correlation_id", default="")


def resolve_correlation_id(header_value: str | None) -> str:
    """Reuse the caller's id when one was sent, otherwise mint a new one."""
    return (header_value or "").strip() or str(uuid.uuid4())


def set_correlation_id(value: str) -> None:
    _REQUEST_CORRELATION_ID.set((value or "").strip())


def get_correlation_id() -> str:
    return _REQUEST_CORRELATION_ID.get()


def request_correlation_id(request: Any) -> str:
    # Server-error handlers run after the middleware has reset the context var.
    stored = getattr(request.state, "correlation_id", "")
    if stored:
        return stored
    return get_correlation_id() or (request.headers.get(CORRELATION_HEADER) or "").strip()
