"""Redis document/task store.

Documents and task records are RedisJSON values; a RediSearch index over the
`DOC` prefix makes the extracted text searchable.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

import redis.asyncio as redis
from loguru import logger
from redis.commands.search.query import Query
from redis.exceptions import RedisError

from crawlsearch.config import get_settings
from crawlsearch.errors import SearchQueryError, StoreError

DOC_PREFIX = "DOC"
TASK_PREFIX = "taskID"
INDEX_NAME = "docIdx"


def doc_key(url: str) -> str:
    return f"{DOC_PREFIX}:{url}"


def task_key(task_id: str) -> str:
    return f"{TASK_PREFIX}:{task_id}"


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except RedisError as exc:
        raise StoreError(f"{operation} failed: {exc}", code=f"redis_{operation}_error") from exc


class RedisStore:
    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str | None = None) -> "RedisStore":
        client = redis.from_url(url or get_settings().redis_url, encoding="utf-8", decode_responses=True)
        return cls(client)

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except RedisError:
            return False

    async def close(self) -> None:
        await self.client.aclose()

    async def build_index(self) -> None:
        """Create the full-text index over crawled docs; failures are only logged."""
        try:
            await self.client.execute_command(
                "FT.CREATE", INDEX_NAME,
                "ON", "JSON",
                "PREFIX", "1", DOC_PREFIX,
                "SCHEMA",
                "$.doc", "AS", "doc", "TEXT",
                "$.text", "AS", "text", "TEXT",
            )
            logger.info("search index {} created", INDEX_NAME)
        except RedisError as exc:
            logger.error("buildIndex - {}", exc)

    async def get_document(self, url: str) -> dict[str, Any] | None:
        with _store_errors("get_document"):
            return await self.client.json().get(doc_key(url), ".")

    async def put_document(self, url: str, text: str, content_hash: str) -> None:
        with _store_errors("put_document"):
            await self.client.json().set(doc_key(url), ".", {"doc": url, "text": text, "hash": content_hash})

    async def get_task(self, task_id: str) -> dict[str, Any] | None:
        with _store_errors("get_task"):
            return await self.client.json().get(task_key(task_id), ".")

    async def set_task(self, task_id: str, record: dict[str, Any]) -> None:
        with _store_errors("set_task"):
            await self.client.json().set(task_key(task_id), ".", record)

    async def expire_task(self, task_id: str, seconds: int) -> None:
        with _store_errors("expire_task"):
            await self.client.expire(task_key(task_id), int(seconds))

    async def search(self, term: str, *, limit: int | None = None) -> list[str]:
        """Return the URLs of documents whose text matches `term`."""
        size = limit or get_settings().search_max_results
        query = Query(f"@text:{term}").return_fields("doc").paging(0, max(1, int(size)))
        try:
            result = await self.client.ft(INDEX_NAME).search(query)
        except RedisError as exc:
            raise SearchQueryError(f"Query error {term}: {exc}") from exc
        if result is None or getattr(result, "docs", None) is None:
            raise SearchQueryError(f"Query error {term}")
        return [str(doc.doc) for doc in result.docs if getattr(doc, "doc", None)]
