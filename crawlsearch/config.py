"""crawlsearch configuration.

Values come from the process environment, optionally seeded from a `.env`
file at the project root.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_USER_AGENT = "crawlsearch/1.0 (+https://github.com/crawlsearch)"


def _as_int(value: str | None, default: int) -> int:
    try:
        return int(str(value).strip())
    except Exception:
        return int(default)


def _as_float(value: str | None, default: float) -> float:
    try:
        return float(str(value).strip())
    except Exception:
        return float(default)


def _as_url(value: str | None, default: str) -> str:
    raw = (value or "").strip()
    return (raw or default).rstrip("/")


@dataclass(frozen=True)
class Settings:
    base_dir: Path

    # HTTP server
    host: str
    port: int

    # External services
    redis_url: str
    tika_url: str
    tika_timeout_sec: float

    # Crawler
    fetch_timeout_sec: float
    user_agent: str

    # Search
    search_max_results: int


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    base_dir = Path(__file__).resolve().parents[1]
    load_dotenv(dotenv_path=base_dir / ".env", override=False)

    return Settings(
        base_dir=base_dir,
        host=(os.getenv("APP_HOST") or "127.0.0.1").strip(),
        port=_as_int(os.getenv("APP_PORT"), 8000),
        redis_url=_as_url(os.getenv("REDIS_URL"), "redis://localhost:6379"),
        tika_url=_as_url(os.getenv("TIKA_URL"), "http://localhost:9998"),
        tika_timeout_sec=max(1.0, _as_float(os.getenv("TIKA_TIMEOUT_SEC"), 60.0)),
        fetch_timeout_sec=max(1.0, _as_float(os.getenv("CRAWL_FETCH_TIMEOUT_SEC"), 20.0)),
        user_agent=(os.getenv("CRAWL_USER_AGENT") or DEFAULT_USER_AGENT).strip(),
        search_max_results=max(1, _as_int(os.getenv("SEARCH_MAX_RESULTS"), 10)),
    )
