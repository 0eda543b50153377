"""Tests de selección de modo en factory de backend."""

import pytest

from worldstate.persistence import factory as backend_factory
from worldstate.persistence.memory_backend import InMemoryBackend


class _DummyJsonBackend:
    pass


class _DummyDbBackend:
    pass


def test_factory_defaults_to_json(monkeypatch):
    monkeypatch.delenv("WORLDSTATE_BACKEND", raising=False)
    monkeypatch.setattr(backend_factory, "JsonFileBackend", _DummyJsonBackend)
    assert isinstance(backend_factory.create_backend(), _DummyJsonBackend)


def test_factory_selects_db_mode(monkeypatch):
    monkeypatch.setenv("WORLDSTATE_BACKEND", "db")
    monkeypatch.setattr(backend_factory, "DatabaseBackend", _DummyDbBackend)
    assert isinstance(backend_factory.create_backend(), _DummyDbBackend)


def test_factory_selects_memory_mode(monkeypatch):
    monkeypatch.setenv("WORLDSTATE_BACKEND", " Memory ")
    assert isinstance(backend_factory.create_backend(), InMemoryBackend)


def test_factory_rejects_invalid_mode(monkeypatch):
    monkeypatch.setenv("WORLDSTATE_BACKEND", "sheets")
    with pytest.raises(RuntimeError):
        backend_factory.create_backend()


def test_db_backend_requires_dsn(monkeypatch):
    monkeypatch.setenv("WORLDSTATE_BACKEND", "db")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        backend_factory.create_backend()
