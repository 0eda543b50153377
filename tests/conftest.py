"""Fixtures compartidos para tests."""

import importlib
import types

import pytest

from worldstate.core.store import PlayerRecordStore
from worldstate.models import COLUMNS
from worldstate.persistence import db_backend
from worldstate.persistence.memory_backend import InMemoryBackend


@pytest.fixture
def backend() -> InMemoryBackend:
    """Tabla con cabecera y tres jugadores."""
    return InMemoryBackend(
        [
            list(COLUMNS),
            [7, 10, 20, 1, 0, "red"],
            [3, -5, 4, 0, 2, "blue"],
            [12, 0, 0, 1, 0, "green"],
        ]
    )


@pytest.fixture
def empty_backend() -> InMemoryBackend:
    """Tabla con solo la cabecera."""
    return InMemoryBackend([list(COLUMNS)])


@pytest.fixture
def store(backend) -> PlayerRecordStore:
    return PlayerRecordStore(backend)


def _fake_psycopg(connect):
    class Error(Exception):
        pass

    class OperationalError(Error):
        pass

    module = types.SimpleNamespace(Error=Error, OperationalError=OperationalError)
    module.connect = lambda *a, **kw: connect(module, *a, **kw)
    return module


def _refuse(module, *args, **kwargs):
    raise module.OperationalError("connection refused")


@pytest.fixture
def unreachable_db(monkeypatch):
    """Sustituye psycopg por un driver cuya conexión siempre falla."""
    fake = _fake_psycopg(_refuse)
    real_import = importlib.import_module
    monkeypatch.setattr(
        db_backend.importlib,
        "import_module",
        lambda name, *a: fake if name == "psycopg" else real_import(name, *a),
    )
    return fake
