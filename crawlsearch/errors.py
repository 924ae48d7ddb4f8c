"""Error taxonomy shared by the crawler, the adapters and the HTTP layer."""
from __future__ import annotations


class CrawlSearchError(RuntimeError):
    """Structured service error."""

    code = "crawlsearch_error"

    def __init__(self, message: str, *, code: str | None = None, status_code: int = 400):
        super().__init__(message)
        if code:
            self.code = code
        self.status_code = status_code


class FetchError(CrawlSearchError):
    """A document could not be retrieved."""

    code = "fetch_error"


class ExtractionServiceError(CrawlSearchError):
    """The text extraction service rejected or failed a request."""

    code = "extraction_error"


class StoreError(CrawlSearchError):
    """A read or write against the document/task store failed."""

    code = "store_error"


class TaskNotFoundError(CrawlSearchError):
    code = "task_not_found"

    def __init__(self, task_id: str):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class SearchQueryError(CrawlSearchError):
    code = "search_query_error"


class TaskLaunchError(CrawlSearchError):
    code = "task_launch_error"
