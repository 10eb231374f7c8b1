"""
Tests for crawl-state snapshots.
"""
import json

import pytest

from linkcrawler.errors import SnapshotError
from linkcrawler.frontier import CrawlState, LinkGraph
from linkcrawler.state import SNAPSHOT_VERSION, load_state, save_state, state_from_dict, state_to_dict

A = "https://a.example/"
B = "https://b.example/"
C = "https://c.example/"


def sample_state():
    return CrawlState([C, B, C], LinkGraph({A: [B, C, C], B: []}))


class TestSnapshotSchema:
    """Tests for the snapshot dict layout."""

    def test_to_dict(self):
        assert state_to_dict(sample_state()) == {
            "version": SNAPSHOT_VERSION,
            "frontier": [C, B, C],
            "graph": [
                {"url": A, "links": [B, C, C]},
                {"url": B, "links": []},
            ],
        }

    def test_from_dict(self):
        state = state_from_dict(state_to_dict(sample_state()))

        assert state.frontier.urls() == [C, B, C]
        assert state.graph.to_dict() == {A: [B, C, C], B: []}
        assert state.frontier.is_known(A)

    @pytest.mark.parametrize("data", [
        [],
        {"frontier": []},
        {"version": 99, "frontier": [], "graph": []},
        {"version": SNAPSHOT_VERSION, "frontier": "https://a.example/", "graph": []},
        {"version": SNAPSHOT_VERSION, "frontier": [1, 2], "graph": []},
        {"version": SNAPSHOT_VERSION, "frontier": [], "graph": {}},
        {"version": SNAPSHOT_VERSION, "frontier": [], "graph": [["a", []]]},
        {"version": SNAPSHOT_VERSION, "frontier": [], "graph": [{"links": []}]},
        {"version": SNAPSHOT_VERSION, "frontier": [], "graph": [{"url": A, "links": "x"}]},
        {"version": SNAPSHOT_VERSION, "frontier": [], "graph": [{"url": A, "links": []}, {"url": A, "links": []}]},
    ])
    def test_invalid_snapshot(self, data):
        with pytest.raises(SnapshotError):
            state_from_dict(data)

    @pytest.mark.parametrize("data", [
        {"version": SNAPSHOT_VERSION, "frontier": ["/relative"], "graph": []},
        {"version": SNAPSHOT_VERSION, "frontier": ["https://a.example/page#top"], "graph": []},
        {"version": SNAPSHOT_VERSION, "frontier": [], "graph": [{"url": "HTTPS://A.example", "links": []}]},
        {"version": SNAPSHOT_VERSION, "frontier": [], "graph": [{"url": A, "links": ["mailto:x@a.example"]}]},
        {"version": SNAPSHOT_VERSION, "frontier": [], "graph": [{"url": A, "links": ["https://b.example:443/"]}]},
    ])
    def test_non_canonical_urls_rejected(self, data):
        with pytest.raises(SnapshotError, match="Non-canonical"):
            state_from_dict(data)


class TestSaveLoad:
    """Tests for save_state() and load_state()."""

    def test_round_trip(self, tmp_path):
        path = tmp_path / "crawler.json"
        state = sample_state()

        save_state(state, path)

        assert load_state(path) == state

    def test_pretty_output(self, tmp_path):
        path = save_state(sample_state(), tmp_path / "nested" / "crawler.json", pretty=True)

        text = path.read_text(encoding="utf-8")
        assert text.startswith("{\n  ")
        assert json.loads(text)["version"] == SNAPSHOT_VERSION

    def test_missing_file(self, tmp_path):
        assert load_state(tmp_path / "missing.json") is None

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "crawler.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(SnapshotError):
            load_state(path)

    def test_empty_state(self, tmp_path):
        path = save_state(CrawlState(), tmp_path / "crawler.json")

        loaded = load_state(path)
        assert loaded.frontier.urls() == []
        assert loaded.graph.explored_count() == 0
