"""Budgeted depth-first crawler.

The spider walks every in-domain link reachable from the domain root, fetches
each document once per run, re-extracts text only when the document bytes
changed since the last stored version, and counts failures instead of
raising them. The run ends when the link graph is exhausted or one of the two
budgets in `crawlsearch.core.budget` is spent.
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Protocol

import httpx
from loguru import logger

from crawlsearch.core.budget import budget_exhausted, should_continue
from crawlsearch.core.fingerprint import detect_change
from crawlsearch.core.links import classify_link, extract_links
from crawlsearch.errors import FetchError
from crawlsearch.observability.metrics import (
    CRAWL_ERRORS_TOTAL,
    DOCUMENTS_FETCHED_TOTAL,
    DOCUMENTS_INDEXED_TOTAL,
    error_code,
)


class DocumentStore(Protocol):
    async def get_document(self, url: str) -> dict[str, Any] | None: ...

    async def put_document(self, url: str, text: str, content_hash: str) -> None: ...


class TextExtractor(Protocol):
    async def extract(self, data: bytes) -> str: ...


class StepOutcome(str, Enum):
    INDEXED = "indexed"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass
class StepResult:
    outcome: StepOutcome
    children: list[str] = field(default_factory=list)
    error: Exception | None = None


@dataclass
class CrawlStats:
    indexed: int = 0
    errors: int = 0
    time: float = 0.0
    iterations: int = 0

    def as_record(self) -> dict[str, Any]:
        return asdict(self)


class Spider:
    def __init__(
        self,
        fqdn: str,
        store: DocumentStore,
        extractor: TextExtractor,
        client: httpx.AsyncClient,
    ):
        self.fqdn = fqdn
        self.store = store
        self.extractor = extractor
        self.client = client
        self.start = time.monotonic()
        self.visited: set[str] = set()
        self.indexed = 0
        self.errors = 0
        self.iterations = 0
        self.log = logger.bind(fqdn=fqdn)

    def snapshot(self) -> CrawlStats:
        return CrawlStats(
            indexed=self.indexed,
            errors=self.errors,
            time=round(max(0.0, time.monotonic() - self.start), 2),
            iterations=self.iterations,
        )

    async def crawl(self, doc: str | None = None) -> CrawlStats:
        """Crawl from `doc` (default: the domain root) and return the final counters."""
        # LIFO work-list; children are pushed reversed so they pop in page order.
        pending = [doc or self.fqdn]
        while pending:
            current = pending.pop()
            self.iterations += 1
            if not should_continue(self.iterations, self.errors, current in self.visited):
                if budget_exhausted(self.iterations, self.errors):
                    self.log.info(
                        "spider - budget exhausted at {} (iterations={}, errors={})",
                        current,
                        self.iterations,
                        self.errors,
                    )
                    break
                continue

            result = await self._step(current)
            if result.outcome is StepOutcome.FAILED:
                self.errors += 1
                CRAWL_ERRORS_TOTAL.labels(code=error_code(result.error)).inc()
                self.log.warning("spider - {} - {}", current, result.error)
                continue
            pending.extend(reversed(result.children))
        return self.snapshot()

    async def _step(self, doc: str) -> StepResult:
        try:
            self.log.info("spider - crawled doc: {}", doc)
            data = await self._fetch(doc)
            self.visited.add(doc)
            DOCUMENTS_FETCHED_TOTAL.inc()

            outcome = StepOutcome.UNCHANGED
            needs_extraction, content_hash = detect_change(data, await self.store.get_document(doc))
            if needs_extraction:
                text = await self.extractor.extract(data)
                await self.store.put_document(doc, text, content_hash)
                self.indexed += 1
                DOCUMENTS_INDEXED_TOTAL.inc()
                outcome = StepOutcome.INDEXED

            children = []
            for href in extract_links(data):
                nxt = classify_link(href, self.fqdn, doc)
                if nxt:
                    children.append(nxt)
            return StepResult(outcome=outcome, children=children)
        except Exception as exc:
            return StepResult(outcome=StepOutcome.FAILED, error=exc)

    async def _fetch(self, doc: str) -> bytes:
        url = f"https://{doc}"
        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(f"GET {url} returned HTTP {exc.response.status_code}", code="fetch_http_status") from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"GET {url} failed: {exc}", code="fetch_transport_error") from exc
        return response.content
