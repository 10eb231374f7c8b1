"""
Crawl state: the URL frontier and the link graph.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, Dict, Iterable, Iterator, List, Optional, Tuple

from linkcrawler.errors import FrontierEmpty


class LinkGraph:
    """Visited URL -> links found on that page, in document order."""

    def __init__(self, nodes: Optional[Dict[str, List[str]]] = None) -> None:
        self._nodes: Dict[str, List[str]] = {}
        for url, links in (nodes or {}).items():
            self.record(url, links)

    def record(self, url: str, links: Iterable[str]) -> None:
        """Store links for url, replacing any earlier visit."""
        self._nodes[url] = list(links)

    def links_for(self, url: str) -> Optional[List[str]]:
        links = self._nodes.get(url)
        return list(links) if links is not None else None

    def explored_count(self) -> int:
        return len(self._nodes)

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        for url, links in self._nodes.items():
            yield url, list(links)

    def to_dict(self) -> Dict[str, List[str]]:
        return {url: list(links) for url, links in self._nodes.items()}

    def __contains__(self, url: object) -> bool:
        return url in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinkGraph):
            return NotImplemented
        return self._nodes == other._nodes

    def __repr__(self) -> str:
        return f"LinkGraph({self._nodes!r})"


class Frontier:
    """
    FIFO queue of URLs waiting to be visited.

    Duplicates are allowed in the queue; whether an already visited URL is
    fetched again is decided by the caller at dequeue time via is_known().
    """

    def __init__(self, graph: LinkGraph, urls: Iterable[str] = ()) -> None:
        self._graph = graph
        self._pending: Deque[str] = deque(urls)

    def enqueue(self, url: str) -> None:
        self._pending.append(url)

    def extend(self, urls: Iterable[str]) -> None:
        self._pending.extend(urls)

    def dequeue(self) -> str:
        """Remove and return the head URL, or raise FrontierEmpty."""
        if not self._pending:
            raise FrontierEmpty("Frontier is empty")
        return self._pending.popleft()

    def dequeue_batch(self, n: int) -> List[str]:
        """Remove up to n URLs from the head, in queue order."""
        batch = []
        while self._pending and len(batch) < n:
            batch.append(self._pending.popleft())
        return batch

    def is_known(self, url: str) -> bool:
        """True if url is already a key in the link graph."""
        return url in self._graph

    def urls(self) -> List[str]:
        return list(self._pending)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._pending))

    def __len__(self) -> int:
        return len(self._pending)

    def __bool__(self) -> bool:
        return bool(self._pending)


class CrawlState:
    """Frontier + link graph; the unit that is saved and loaded."""

    def __init__(
        self,
        frontier_urls: Iterable[str] = (),
        graph: Optional[LinkGraph] = None,
    ) -> None:
        self.graph = graph if graph is not None else LinkGraph()
        self.frontier = Frontier(self.graph, frontier_urls)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CrawlState):
            return NotImplemented
        return self.graph == other.graph and self.frontier.urls() == other.frontier.urls()

    def __repr__(self) -> str:
        return f"CrawlState(frontier={self.frontier.urls()!r}, graph={self.graph!r})"
