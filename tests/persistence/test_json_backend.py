"""Tests de JsonFileBackend."""

import json

import pytest

from worldstate.core.store import ErrorKind, PlayerRecordStore
from worldstate.models import PlayerRecord, PlayerUpdate
from worldstate.persistence.backend import BackendError, BackendUnavailableError
from worldstate.persistence.json_backend import JsonFileBackend


def test_missing_table_is_unavailable(tmp_path):
    backend = JsonFileBackend(base_path=tmp_path, table="players")
    with pytest.raises(BackendUnavailableError):
        backend.row_count()


def test_store_on_missing_table_degrades(tmp_path):
    store = PlayerRecordStore(JsonFileBackend(base_path=tmp_path))
    assert store.read_all() == []
    assert store.update(PlayerUpdate(user_id=7, x=1, y=1)) is False


def test_create_table_only_once(tmp_path):
    backend = JsonFileBackend(base_path=tmp_path, table="players")
    assert backend.create_table() is True
    assert backend.create_table() is False
    assert json.loads(backend.path.read_text(encoding="utf-8")) == []


def test_corrupt_table_is_backend_error(tmp_path):
    (tmp_path / "players.json").write_text("{not json", encoding="utf-8")
    backend = JsonFileBackend(base_path=tmp_path, table="players")
    with pytest.raises(BackendError):
        backend.get_rows(1, 1, 1, 1)


def test_table_name_and_dir_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("WORLDSTATE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("WORLDSTATE_TABLE", "lobby")
    backend = JsonFileBackend(create=True)
    assert backend.path == tmp_path / "lobby.json"
    assert backend.path.exists()


def test_store_round_trip_persists_to_disk(tmp_path):
    path = tmp_path / "players.json"
    path.write_text(
        json.dumps([["userId", "x", "y", "online", "notification", "color"], [7, 10, 20, 1, 0, "red"]]),
        encoding="utf-8",
    )
    store = PlayerRecordStore(JsonFileBackend(base_path=tmp_path))
    assert store.update(PlayerUpdate(user_id=7, x=10.6, y=19.4, online=False, notification=3))

    reopened = PlayerRecordStore(JsonFileBackend(base_path=tmp_path))
    assert reopened.read_all() == [PlayerRecord(user_id=7, x=11, y=19, online=False, notification=3, color="red")]
    assert json.loads(path.read_text(encoding="utf-8"))[1] == [7, 11, 19, 0, 3, "red"]
    assert not list(tmp_path.glob("*.tmp"))


def test_table_with_invalid_utf8_degrades_to_sentinels(tmp_path):
    (tmp_path / "players.json").write_bytes(
        b'[["userId","x","y","online","notification","color"],[7,10,20,1,0,"r\xff"]]'
    )
    backend = JsonFileBackend(base_path=tmp_path, table="players")
    with pytest.raises(BackendError):
        backend.row_count()

    store = PlayerRecordStore(backend)
    result = store.try_read_all()
    assert result.error is ErrorKind.BACKEND_ERROR
    assert store.read_all() == []
    assert store.update(PlayerUpdate(user_id=7, x=1, y=1)) is False
