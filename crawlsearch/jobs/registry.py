"""Background crawl tasks.

Every accepted crawl request becomes one asyncio task with its own store
connection, HTTP client and extraction client. Results flow back to the API
only through the task record in the store.
"""
from __future__ import annotations

import asyncio
import uuid
from typing import Awaitable, Callable

import httpx
from loguru import logger

from crawlsearch.config import Settings, get_settings
from crawlsearch.core.spider import Spider
from crawlsearch.errors import TaskLaunchError
from crawlsearch.infra.extraction.tika import TikaClient
from crawlsearch.infra.store.redis_store import RedisStore
from crawlsearch.jobs.reporter import TaskReporter
from crawlsearch.observability.metrics import CRAWL_TASKS_ACTIVE, CRAWL_TASKS_TOTAL

TaskRunner = Callable[[str, str, Settings], Awaitable[dict]]


async def run_crawl_task(
    task_id: str,
    fqdn: str,
    settings: Settings,
    *,
    store: RedisStore | None = None,
    extractor: TikaClient | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict:
    """Run one crawl from the domain root and persist its final status.

    The store and extractor are created (and closed) here unless supplied;
    `transport` swaps the network layer of the fetch client.
    """
    log = logger.bind(task_id=task_id, fqdn=fqdn)
    log.info("spider - job started {}", fqdn)
    owns_store = store is None
    owns_extractor = extractor is None
    store = store or RedisStore.from_url(settings.redis_url)
    extractor = extractor or TikaClient(settings.tika_url, timeout=settings.tika_timeout_sec)
    try:
        reporter = TaskReporter(store)
        await reporter.mark_active(task_id)
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(settings.fetch_timeout_sec, connect=10.0),
            follow_redirects=True,
            headers={"User-Agent": settings.user_agent},
            transport=transport,
        ) as client:
            spider = Spider(fqdn, store, extractor, client)
            stats = await spider.crawl()
        record = await reporter.mark_complete(task_id, fqdn, stats)
        log.info(
            "spider - {} complete. docs indexed:{}, errors:{}, time:{}",
            fqdn,
            stats.indexed,
            stats.errors,
            stats.time,
        )
        return record
    finally:
        if owns_extractor:
            await extractor.stop()
        if owns_store:
            await store.close()


class TaskRegistry:
    def __init__(self, settings: Settings | None = None, runner: TaskRunner = run_crawl_task):
        self.settings = settings or get_settings()
        self.runner = runner
        self._tasks: dict[str, asyncio.Task] = {}

    def launch(self, fqdn: str) -> str:
        task_id = str(uuid.uuid4())
        try:
            task = asyncio.get_running_loop().create_task(
                self.runner(task_id, fqdn, self.settings),
                name=f"crawl-{task_id}",
            )
        except RuntimeError as exc:
            raise TaskLaunchError(f"Unable to start crawl for {fqdn}: {exc}") from exc
        self._tasks[task_id] = task
        CRAWL_TASKS_ACTIVE.inc()
        task.add_done_callback(lambda done: self._on_done(task_id, done))
        return task_id

    def _on_done(self, task_id: str, task: asyncio.Task) -> None:
        self._tasks.pop(task_id, None)
        CRAWL_TASKS_ACTIVE.dec()
        if task.cancelled():
            CRAWL_TASKS_TOTAL.labels(status="cancelled").inc()
            logger.warning("crawl task {} cancelled", task_id)
            return
        exc = task.exception()
        if exc is not None:
            CRAWL_TASKS_TOTAL.labels(status="failed").inc()
            logger.opt(exception=exc).error("crawl task {} failed: {}", task_id, exc)
            return
        CRAWL_TASKS_TOTAL.labels(status="complete").inc()

    def active(self) -> list[str]:
        return list(self._tasks)

    async def wait(self, task_id: str) -> None:
        task = self._tasks.get(task_id)
        if task is not None:
            await asyncio.wait({task})

    async def stop(self) -> None:
        """Cancel outstanding crawls; only used on application shutdown."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except BaseException:
                pass
        self._tasks.clear()
