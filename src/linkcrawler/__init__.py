"""
Breadth-first web crawler that records a directed link graph.
Crawl state (frontier + graph) is saved as a JSON snapshot so runs can resume.
"""
from linkcrawler.crawler import BatchResult, Crawler, CrawlStats, Visit
from linkcrawler.errors import (
    CrawlerError,
    FetchError,
    FrontierEmpty,
    RequestFailed,
    SnapshotError,
    UrlParseError,
)
from linkcrawler.fetch import HttpFetcher
from linkcrawler.frontier import CrawlState, Frontier, LinkGraph
from linkcrawler.state import load_state, save_state
from linkcrawler.urls import extract_links, normalize_url

__version__ = "1.0.0"
__all__ = [
    "BatchResult",
    "Crawler",
    "CrawlStats",
    "CrawlState",
    "CrawlerError",
    "FetchError",
    "Frontier",
    "FrontierEmpty",
    "HttpFetcher",
    "LinkGraph",
    "RequestFailed",
    "SnapshotError",
    "UrlParseError",
    "Visit",
    "extract_links",
    "load_state",
    "normalize_url",
    "save_state",
]
