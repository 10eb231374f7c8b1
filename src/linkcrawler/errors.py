"""
Exceptions raised by the crawler.
"""
from __future__ import annotations

from typing import Optional


class CrawlerError(Exception):
    """Base class for crawl engine errors."""


class UrlParseError(CrawlerError, ValueError):
    """A seed or visited URL is not a valid absolute URL."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid URL: {url!r}")
        self.url = url


class RequestFailed(CrawlerError):
    """A page could not be fetched; the original FetchError is the cause."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Request failed: {url}")
        self.url = url


class FrontierEmpty(CrawlerError):
    """No URL left to dequeue. This is how a crawl normally ends."""


class SnapshotError(CrawlerError):
    """A crawl-state snapshot could not be read."""


class FetchError(Exception):
    """Raised by fetchers for network errors, bad statuses and non-text bodies."""

    def __init__(
        self,
        url: str,
        message: str,
        status_code: Optional[int] = None,
        non_text: bool = False,
    ) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url
        self.status_code = status_code
        self.non_text = non_text

    @property
    def kind(self) -> str:
        """Error bucket used in crawl statistics."""
        if self.non_text:
            return "non_text"
        if self.status_code is None:
            return "connection_error"
        return str(self.status_code)
