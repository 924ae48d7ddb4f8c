"""FastAPI application entry point."""
from __future__ import annotations

import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from crawlsearch import __version__
from crawlsearch.api.routes import crawl, search, system
from crawlsearch.config import get_settings
from crawlsearch.errors import CrawlSearchError
from crawlsearch.infra.store.redis_store import RedisStore
from crawlsearch.jobs.registry import TaskRegistry
from crawlsearch.observability.context import (
    CORRELATION_HEADER,
    request_correlation_id,
    resolve_correlation_id,
    set_correlation_id,
)
from crawlsearch.observability.metrics import HTTP_REQUEST_LATENCY_SEC, HTTP_REQUESTS_TOTAL


def _error_response(request: Request, message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message},
        headers={CORRELATION_HEADER: request_correlation_id(request)},
    )


def create_app(*, store: RedisStore | None = None, registry: TaskRegistry | None = None) -> FastAPI:
    """Build the API app; `store`/`registry` replace the Redis-backed defaults."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = get_settings()
        app.state.store = store or RedisStore.from_url(settings.redis_url)
        app.state.registry = registry or TaskRegistry(settings)
        await app.state.store.build_index()
        logger.info("app - listening on port {}", settings.port)
        yield
        await app.state.registry.stop()
        await app.state.store.close()

    app = FastAPI(
        title="crawlsearch",
        description="Domain crawler with full-text document search",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(system.router)
    app.include_router(crawl.router)
    app.include_router(search.router)

    @app.middleware("http")
    async def observability_middleware(request: Request, call_next):
        correlation_id = resolve_correlation_id(request.headers.get(CORRELATION_HEADER))
        request.state.correlation_id = correlation_id
        set_correlation_id(correlation_id)
        start = time.perf_counter()
        status_code = 500
        try:
            with logger.contextualize(correlation_id=correlation_id):
                response = await call_next(request)
            status_code = int(getattr(response, "status_code", 500))
            response.headers[CORRELATION_HEADER] = correlation_id
            return response
        finally:
            route = request.scope.get("route")
            path = getattr(route, "path", None) or request.url.path
            duration = max(0.0, time.perf_counter() - start)
            HTTP_REQUESTS_TOTAL.labels(request.method, path, str(status_code)).inc()
            HTTP_REQUEST_LATENCY_SEC.labels(request.method, path).observe(duration)
            set_correlation_id("")

    @app.exception_handler(CrawlSearchError)
    async def crawlsearch_exception_handler(request: Request, exc: CrawlSearchError):
        logger.error("app - {} {} - {}", request.method, request.url.path, exc)
        return _error_response(request, str(exc), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        return _error_response(request, f"{location}: {message}" if location else str(message))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error("app - {} {} - unhandled error", request.method, request.url.path)
        return _error_response(request, str(exc) or type(exc).__name__)

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run("crawlsearch.api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
