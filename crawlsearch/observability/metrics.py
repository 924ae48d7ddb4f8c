"""Prometheus metrics helpers."""
from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

HTTP_REQUESTS_TOTAL = Counter(
    "crawlsearch_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
HTTP_REQUEST_LATENCY_SEC = Histogram(
    "crawlsearch_http_request_latency_seconds",
    "HTTP request latency in seconds",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)
DOCUMENTS_FETCHED_TOTAL = Counter(
    "crawlsearch_documents_fetched_total",
    "Documents fetched successfully by the crawler",
)
DOCUMENTS_INDEXED_TOTAL = Counter(
    "crawlsearch_documents_indexed_total",
    "Documents (re)extracted and written to the store",
)
CRAWL_ERRORS_TOTAL = Counter(
    "crawlsearch_crawl_errors_total",
    "Traversal steps that failed, by error code",
    ["code"],
)
CRAWL_TASKS_ACTIVE = Gauge(
    "crawlsearch_crawl_tasks_active",
    "Crawl tasks currently running in this process",
)
CRAWL_TASKS_TOTAL = Counter(
    "crawlsearch_crawl_tasks_total",
    "Finished crawl tasks by final status",
    ["status"],
)


def error_code(exc: BaseException) -> str:
    return str(getattr(exc, "code", "") or type(exc).__name__)
