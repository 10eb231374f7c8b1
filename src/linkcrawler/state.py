"""
Saving and loading crawl-state snapshots as JSON.

Snapshot layout (version 1):

    {
      "version": 1,
      "frontier": ["https://a.example/", ...],
      "graph": [{"url": "https://a.example/", "links": ["https://b.example/"]}, ...]
    }
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from linkcrawler.errors import SnapshotError
from linkcrawler.frontier import CrawlState, LinkGraph
from linkcrawler.urls import normalize_url

SNAPSHOT_VERSION = 1


def state_to_dict(state: CrawlState) -> Dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "frontier": state.frontier.urls(),
        "graph": [{"url": url, "links": links} for url, links in state.graph.items()],
    }


def state_from_dict(data: Any) -> CrawlState:
    """Build a CrawlState from a decoded snapshot, validating its shape."""
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")

    version = data.get("version")
    if version != SNAPSHOT_VERSION:
        raise SnapshotError(f"Unsupported snapshot version: {version!r}")

    frontier = data.get("frontier", [])
    if not isinstance(frontier, list) or not all(isinstance(u, str) for u in frontier):
        raise SnapshotError("'frontier' must be a list of URLs")
    _check_canonical(frontier, "frontier")

    entries = data.get("graph", [])
    if not isinstance(entries, list):
        raise SnapshotError("'graph' must be a list of nodes")

    graph = LinkGraph()
    for entry in entries:
        if not isinstance(entry, dict):
            raise SnapshotError("Graph node must be an object")
        url, links = entry.get("url"), entry.get("links")
        if not isinstance(url, str):
            raise SnapshotError("Graph node is missing 'url'")
        if not isinstance(links, list) or not all(isinstance(u, str) for u in links):
            raise SnapshotError(f"Graph node {url!r} has invalid 'links'")
        _check_canonical([url], "graph node")
        _check_canonical(links, f"links of {url}")
        if url in graph:
            raise SnapshotError(f"Duplicate graph node: {url}")
        graph.record(url, links)

    return CrawlState(frontier_urls=frontier, graph=graph)


def _check_canonical(urls: List[str], where: str) -> None:
    """Reject URLs that the normalizer would rewrite or discard."""
    for url in urls:
        if normalize_url(url, url) != url:
            raise SnapshotError(f"Non-canonical URL in {where}: {url!r}")


def save_state(state: CrawlState, path: Union[str, Path], pretty: bool = False) -> Path:
    """Write the whole crawl state to path."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    json_text = json.dumps(state_to_dict(state), ensure_ascii=False, indent=2 if pretty else None)
    output_path.write_text(json_text, encoding="utf-8")
    return output_path


def load_state(path: Union[str, Path]) -> Optional[CrawlState]:
    """Read a snapshot, or return None if there is none at path."""
    input_path = Path(path)
    if not input_path.exists():
        return None
    try:
        data = json.loads(input_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SnapshotError(f"Could not read snapshot {input_path}: {e}") from e
    return state_from_dict(data)
