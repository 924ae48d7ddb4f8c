"""Content fingerprinting for change detection across crawl runs."""
from __future__ import annotations

import hashlib
from typing import Any, Mapping


def fingerprint(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def detect_change(data: bytes, stored: Mapping[str, Any] | None) -> tuple[bool, str]:
    """Return (needs_extraction, fingerprint) for freshly fetched bytes.

    Extraction is needed when the document has no stored record or the stored
    hash differs from the hash of `data`.
    """
    digest = fingerprint(data)
    if not stored:
        return True, digest
    return stored.get("hash") != digest, digest
