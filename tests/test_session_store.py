"""Tests for the session stores."""

import json

from schemas.v1.models import Session
from session_store import FileSessionStore, MemorySessionStore


def test_memory_store_round_trip(user):
    store = MemorySessionStore()
    assert store.load() is None

    store.save(Session(access_token="t", user=user))
    assert store.load().access_token == "t"

    store.clear()
    assert store.load() is None


class TestFileSessionStore:
    def test_missing_file(self, tmp_path):
        assert FileSessionStore(str(tmp_path / "session.json")).load() is None

    def test_save_and_load(self, tmp_path, user):
        path = tmp_path / "session.json"
        store = FileSessionStore(str(path))

        store.save(Session(access_token="t", user=user))

        stored = json.loads(path.read_text())
        assert stored["accessToken"] == "t"
        assert stored["user"]["email"] == "ann@example.com"
        assert FileSessionStore(str(path)).load().user == user

    def test_corrupt_file_is_discarded(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{broken")

        assert FileSessionStore(str(path)).load() is None
        assert not path.exists()

    def test_wrong_shape_is_discarded(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"accessToken": "t"}))

        assert FileSessionStore(str(path)).load() is None
        assert not path.exists()

    def test_clear_without_file(self, tmp_path):
        FileSessionStore(str(tmp_path / "session.json")).clear()

    def test_path_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SESSION_FILE", str(tmp_path / "env.json"))
        assert FileSessionStore().path == str(tmp_path / "env.json")
