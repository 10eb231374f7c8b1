"""
Crawl orchestration: single-step and batched frontier expansion.
"""
from __future__ import annotations

from collections import defaultdict
from concurrent.futures import ALL_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from linkcrawler.errors import FetchError, FrontierEmpty, RequestFailed, UrlParseError
from linkcrawler.fetch import Fetcher
from linkcrawler.frontier import CrawlState, Frontier, LinkGraph
from linkcrawler.urls import extract_links, is_absolute_url, normalize_url


@dataclass(slots=True)
class Visit:
    """A successfully fetched page and the links found on it."""
    url: str
    links: List[str]


@dataclass(slots=True)
class BatchResult:
    """Outcome of one step_concurrent() call."""
    visits: List[Visit] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def dequeued(self) -> int:
        return len(self.visits) + len(self.failed)


@dataclass(slots=True)
class CrawlStats:
    """Statistics collected during crawl for summary output."""
    pages_visited: int = 0
    pages_skipped: int = 0
    links_discovered: int = 0
    error_counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def record_error(self, kind: str) -> None:
        self.error_counts[kind] += 1

    def record_visit(self, visit: Visit) -> None:
        self.pages_visited += 1
        self.links_discovered += len(visit.links)


class Crawler:
    """
    Breadth-first crawler over a frontier and link graph it owns.

    step() visits one URL at a time and can skip URLs that are already in
    the graph. step_concurrent() fetches a batch in parallel and always
    (re-)visits what it dequeues; a known URL costs one extra fetch there.
    """

    def __init__(self, fetch: Fetcher, state: Optional[CrawlState] = None) -> None:
        self.fetch = fetch
        self.state = state if state is not None else CrawlState()
        self.stats = CrawlStats()

    @classmethod
    def new(cls, seed_urls: Iterable[str], fetch: Fetcher) -> "Crawler":
        """Create a crawler whose frontier holds the given seed URLs."""
        crawler = cls(fetch)
        for url in seed_urls:
            crawler.add_to_queue(url)
        return crawler

    @property
    def frontier(self) -> Frontier:
        return self.state.frontier

    @property
    def graph(self) -> LinkGraph:
        return self.state.graph

    def add_to_queue(self, url: str) -> str:
        """Normalize url and append it to the frontier."""
        if not is_absolute_url(url):
            raise UrlParseError(url)
        canonical = normalize_url(url, url)
        if canonical is None:
            raise UrlParseError(url)
        self.frontier.enqueue(canonical)
        return canonical

    def explored_count(self) -> int:
        return self.graph.explored_count()

    def visit_one(self, url: str) -> Visit:
        """
        Fetch url, queue the links found on it and record it in the graph.

        Raises UrlParseError before fetching if url is not absolute, and
        RequestFailed if the fetch fails. Neither case changes the state.
        """
        if not is_absolute_url(url):
            self.stats.record_error("invalid_url")
            raise UrlParseError(url)

        try:
            body = self.fetch(url)
        except FetchError as e:
            self.stats.record_error(e.kind)
            raise RequestFailed(url) from e

        return self._record(url, body)

    def step(self, skip_if_known: bool = True) -> Optional[Visit]:
        """
        Dequeue and visit one URL.

        Returns None when the URL was skipped because it is already in the
        graph. Raises FrontierEmpty when there is nothing to dequeue; the
        dequeued URL is not put back if the visit fails.
        """
        url = self.frontier.dequeue()
        if skip_if_known and self.frontier.is_known(url):
            self.stats.pages_skipped += 1
            return None
        return self.visit_one(url)

    def step_concurrent(self, n: int) -> BatchResult:
        """
        Dequeue up to n URLs and fetch them concurrently.

        Waits for every fetch to finish, then applies the successful ones in
        dequeue order on the calling thread. Failed fetches, whatever they
        raised, are dropped and reported in BatchResult.failed; only an
        empty frontier raises.
        """
        if n < 1:
            raise ValueError(f"Batch size must be at least 1, got {n}")

        urls = self.frontier.dequeue_batch(n)
        if not urls:
            raise FrontierEmpty("Frontier is empty")

        result = BatchResult()
        pending: List[Tuple[str, Future]] = []
        with ThreadPoolExecutor(max_workers=len(urls)) as pool:
            for url in urls:
                if not is_absolute_url(url):
                    self.stats.record_error("invalid_url")
                    result.failed.append(url)
                    continue
                pending.append((url, pool.submit(self.fetch, url)))
            wait([future for _, future in pending], return_when=ALL_COMPLETED)

        for url, future in pending:
            error = future.exception()
            if error is None:
                result.visits.append(self._record(url, future.result()))
            else:
                kind = error.kind if isinstance(error, FetchError) else "unexpected_error"
                self.stats.record_error(kind)
                result.failed.append(url)

        return result

    def _record(self, url: str, body: str) -> Visit:
        links = extract_links(url, body)
        self.frontier.extend(links)
        self.graph.record(url, links)
        visit = Visit(url=url, links=links)
        self.stats.record_visit(visit)
        return visit
