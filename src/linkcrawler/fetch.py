"""
HTTP fetching.
"""
from __future__ import annotations

import threading
from typing import Callable, List

import requests

from linkcrawler.errors import FetchError

DEFAULT_TIMEOUT_S = 15.0
DEFAULT_USER_AGENT = "linkcrawler/1.0"

# Any callable that returns a page body or raises FetchError
Fetcher = Callable[[str], str]


class HttpFetcher:
    """
    Fetch page bodies over HTTP.

    requests.Session is not thread-safe, so every thread calling the
    fetcher (one per step_concurrent worker) gets its own session from
    session_factory. close() closes all of them.
    """

    def __init__(
        self,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        user_agent: str = DEFAULT_USER_AGENT,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self.timeout_s = timeout_s
        self.user_agent = user_agent
        self.session_factory = session_factory
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        """The calling thread's session, created on first use."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self.session_factory()
            session.headers["User-Agent"] = self.user_agent
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def __call__(self, url: str) -> str:
        try:
            resp = self.session.get(url, timeout=self.timeout_s, allow_redirects=True)
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e

        if resp.status_code >= 400:
            raise FetchError(url, f"HTTP {resp.status_code}", status_code=resp.status_code)

        content_type = (resp.headers.get("content-type") or "").lower()
        if content_type and not _is_textual(content_type):
            raise FetchError(
                url,
                f"non-text content ({content_type})",
                status_code=resp.status_code,
                non_text=True,
            )

        try:
            return resp.text
        except (requests.RequestException, LookupError, UnicodeDecodeError) as e:
            raise FetchError(url, f"could not decode body: {e}") from e

    def close(self) -> None:
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()


def _is_textual(content_type: str) -> bool:
    mime = content_type.split(";", 1)[0].strip()
    return mime.startswith("text/") or mime.endswith(("+xml", "/xml"))
