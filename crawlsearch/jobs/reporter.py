"""Crawl task status records."""
from __future__ import annotations

from typing import Any, Protocol

from crawlsearch.core.spider import CrawlStats

TASK_TTL_SECONDS = 60 * 60 * 24  # completed task records expire after 24h

STATUS_ACTIVE = "active"
STATUS_COMPLETE = "complete"


class TaskStore(Protocol):
    async def set_task(self, task_id: str, record: dict[str, Any]) -> None: ...

    async def expire_task(self, task_id: str, seconds: int) -> None: ...


class TaskReporter:
    """Writes the two status transitions of a crawl task.

    Store errors are not retried or swallowed; the execution unit running the
    task is expected to log them.
    """

    def __init__(self, store: TaskStore):
        self.store = store

    async def mark_active(self, task_id: str) -> None:
        await self.store.set_task(task_id, {"status": STATUS_ACTIVE})

    async def mark_complete(self, task_id: str, fqdn: str, stats: CrawlStats) -> dict[str, Any]:
        record = {**stats.as_record(), "fqdn": fqdn, "status": STATUS_COMPLETE}
        await self.store.set_task(task_id, record)
        await self.store.expire_task(task_id, TASK_TTL_SECONDS)
        return record
