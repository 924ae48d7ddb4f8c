"""Anchor discovery and recursion-case classification for crawled documents."""
from __future__ import annotations

import html.parser
import re
from enum import Enum

_TRAILING_NON_ALNUM = re.compile(r"[^A-Za-z0-9]\Z")
_PROTOCOL_PREFIX = re.compile(r"^(\w+:|)//")


class LinkCase(str, Enum):
    ABSOLUTE_SAME_DOMAIN = "absolute_same_domain"
    ROOT_RELATIVE = "root_relative"
    RELATIVE = "relative"
    NO_RECURSION = "no_recursion"


class LinkExtractor(html.parser.HTMLParser):
    def __init__(self):
        super().__init__()
        self.links: list[str] = []

    def handle_starttag(self, tag, attrs):
        if tag.lower() != "a":
            return
        for key, value in attrs:
            if key.lower() == "href" and value:
                self.links.append(value)


def extract_links(data: bytes | str) -> list[str]:
    """Return every anchor href in document order, duplicates included."""
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    extractor = LinkExtractor()
    extractor.feed(data)
    extractor.close()
    return extractor.links


def normalize_href(href: str) -> str:
    """Drop a single trailing non-alphanumeric character (one pass only)."""
    return _TRAILING_NON_ALNUM.sub("", href, count=1)


def categorize_link(href: str | None, fqdn: str, doc: str) -> tuple[LinkCase, str | None]:
    if not href:
        return LinkCase.NO_RECURSION, None
    link = normalize_href(href)
    if link.startswith(f"https://{fqdn}"):
        return LinkCase.ABSOLUTE_SAME_DOMAIN, _PROTOCOL_PREFIX.sub("", link, count=1)
    if link.startswith("/"):
        return LinkCase.ROOT_RELATIVE, fqdn + link
    lowered = link.lower()
    if link and not lowered.startswith("http") and not lowered.startswith("mailto"):
        return LinkCase.RELATIVE, f"{doc}/{link}"
    # cross-domain absolute links, plain-http links, mailto
    return LinkCase.NO_RECURSION, None


def classify_link(href: str | None, fqdn: str, doc: str) -> str | None:
    """Map a raw href to the next document URL to crawl, or None.

    `fqdn` is the domain under crawl and `doc` the scheme-less URL of the page
    the href was found on. Returned URLs are scheme-less as well.
    """
    return categorize_link(href, fqdn, doc)[1]
