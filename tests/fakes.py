"""In-process stand-ins for Redis, Tika and the crawled web site."""
from __future__ import annotations

import copy

import httpx


class InMemoryStore:
    def __init__(self):
        self.documents: dict[str, dict] = {}
        self.tasks: dict[str, dict] = {}
        self.ttls: dict[str, int] = {}
        self.document_writes: list[str] = []
        self.index_built = False
        self.closed = False

    async def build_index(self) -> None:
        self.index_built = True

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self.closed = True

    async def get_document(self, url: str):
        record = self.documents.get(url)
        return copy.deepcopy(record) if record else None

    async def put_document(self, url: str, text: str, content_hash: str) -> None:
        self.documents[url] = {"doc": url, "text": text, "hash": content_hash}
        self.document_writes.append(url)

    async def get_task(self, task_id: str):
        record = self.tasks.get(task_id)
        return copy.deepcopy(record) if record else None

    async def set_task(self, task_id: str, record: dict) -> None:
        self.tasks[task_id] = copy.deepcopy(record)

    async def expire_task(self, task_id: str, seconds: int) -> None:
        self.ttls[task_id] = seconds

    async def search(self, term: str, *, limit: int | None = None) -> list[str]:
        needle = term.lower()
        hits = [doc["doc"] for doc in self.documents.values() if needle in doc["text"].lower()]
        return hits[: limit or 10]


class FakeExtractor:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[bytes] = []

    async def extract(self, data: bytes) -> str:
        self.calls.append(data)
        if self.fail:
            raise RuntimeError("tika unavailable")
        return data.decode("utf-8", errors="ignore")


def page(*hrefs: str, body: str = "") -> bytes:
    anchors = "".join(f'<a href="{href}">link</a>' for href in hrefs)
    return f"<html><body><p>{body}</p>{anchors}</body></html>".encode()


class FakeSite:
    """Serves `pages` keyed by scheme-less URL; unknown URLs answer 404.

    A value may be bytes (200 body), an int (status code) or an exception
    class derived from httpx.TransportError (raised for the request).
    """

    def __init__(self, pages: dict):
        self.pages = pages
        self.requested: list[str] = []

    def key(self, request: httpx.Request) -> str:
        path = request.url.path
        return request.url.host + ("" if path == "/" else path)

    def handler(self, request: httpx.Request) -> httpx.Response:
        key = self.key(request)
        self.requested.append(key)
        value = self.pages.get(key, 404)
        if isinstance(value, type) and issubclass(value, httpx.TransportError):
            raise value("simulated failure", request=request)
        if isinstance(value, int):
            return httpx.Response(value, request=request)
        return httpx.Response(200, content=value, headers={"content-type": "text/html"}, request=request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport(), follow_redirects=True)
