import json
import logging

from scorer.logic.enums import MatchAction
from scorer.logic.levels import Level
from scorer.logic.match import apply
from scorer.session.match_store import JsonMatchStore
from scorer.tests.conftest import ROUND_TIME, create_match_state
from shared.storage import LocalDocumentStorage


def _played_match():
    match = create_match_state()
    match = apply(match, MatchAction.DOUBLE_CONTRIBUTE, "team-a", now=ROUND_TIME)
    return apply(match, MatchAction.SELF_CONTRIBUTE, "team-b", now=ROUND_TIME)


class TestJsonMatchStore:
    def test_missing_document_loads_empty(self, tmp_path):
        store = JsonMatchStore(LocalDocumentStorage(tmp_path))
        assert store.load_all() == []

    def test_round_trip_keeps_rounds(self, tmp_path):
        store = JsonMatchStore(LocalDocumentStorage(tmp_path))
        match = _played_match()

        store.save_all([match])
        loaded = store.load_all()

        assert len(loaded) == 1
        assert loaded[0].model_dump() == match.model_dump()
        assert loaded[0].team_b.current_level == Level.SIX
        assert len(loaded[0].rounds) == 2

    def test_document_is_a_json_array_with_nested_rounds(self, tmp_path):
        JsonMatchStore(LocalDocumentStorage(tmp_path)).save_all([_played_match()])

        data = json.loads((tmp_path / "matches.json").read_text(encoding="utf-8"))

        assert isinstance(data, list)
        assert data[0]["team_b"]["current_level"] == "6"
        assert data[0]["rounds"][0]["action"] == "double_contribute"
        assert data[0]["rounds"][0]["timestamp"].startswith("2025-05-01T20:00:00")

    def test_custom_document_name(self, tmp_path):
        JsonMatchStore(LocalDocumentStorage(tmp_path), document="club").save_all([])

        assert (tmp_path / "club.json").read_text(encoding="utf-8") == "[]"

    def test_corrupt_document_loads_empty(self, tmp_path, caplog):
        (tmp_path / "matches.json").write_text("{not json", encoding="utf-8")
        store = JsonMatchStore(LocalDocumentStorage(tmp_path))

        with caplog.at_level(logging.WARNING):
            assert store.load_all() == []

        assert "match data invalid" in caplog.text

    def test_partially_valid_document_loads_empty(self, tmp_path):
        good = json.loads(_played_match().model_dump_json())
        broken = dict(good, id="broken")
        broken["team_a"] = dict(good["team_a"], current_level="A4")
        (tmp_path / "matches.json").write_text(json.dumps([good, broken]), encoding="utf-8")

        assert JsonMatchStore(LocalDocumentStorage(tmp_path)).load_all() == []

    def test_undecodable_document_loads_empty(self, tmp_path, caplog):
        (tmp_path / "matches.json").write_bytes(b"\xff\xfe\x00garbage")
        store = JsonMatchStore(LocalDocumentStorage(tmp_path))

        with caplog.at_level(logging.WARNING):
            assert store.load_all() == []

        assert "match data unreadable" in caplog.text
