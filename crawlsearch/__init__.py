"""crawlsearch: domain crawler with Tika text extraction and RediSearch lookup."""

__version__ = "1.0.0"
