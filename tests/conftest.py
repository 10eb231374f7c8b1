"""
Pytest configuration and fixtures for linkcrawler tests.
"""
import sys
import threading
from pathlib import Path

import pytest

# Add src to path so tests run without an editable install
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from linkcrawler.errors import FetchError  # noqa: E402


def page(*hrefs):
    """Build an HTML body with one anchor per href."""
    anchors = "\n".join(f'<a href="{href}">link</a>' for href in hrefs)
    return f"<html><body><h1>header</h1>\n{anchors}\n</body></html>"


class FakeFetcher:
    """
    Fetcher serving canned bodies.

    A value in `pages` may be a body string, a FetchError to raise, or a
    list of those to hand out one per call (the last one repeats).
    """

    def __init__(self, pages=None, **_):
        self.pages = dict(pages or {})
        self.calls = []
        self.closed = False
        self._lock = threading.Lock()

    def __call__(self, url):
        with self._lock:
            self.calls.append(url)
            count = self.calls.count(url)
        outcome = self.pages.get(url)
        if outcome is None:
            raise FetchError(url, "HTTP 404", status_code=404)
        if isinstance(outcome, list):
            outcome = outcome[min(count, len(outcome)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        self.closed = True


@pytest.fixture
def make_fetcher():
    return FakeFetcher
