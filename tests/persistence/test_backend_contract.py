"""Contrato básico de PersistenceBackend, compartido por todas las implementaciones."""

import os

import pytest

from worldstate.persistence.backend import BackendUnavailableError
from worldstate.persistence.db_backend import DatabaseBackend
from worldstate.persistence.json_backend import JsonFileBackend
from worldstate.persistence.memory_backend import InMemoryBackend


def assert_backend_contract(backend):
    assert backend.row_count() == 0
    backend.set_rows(1, 1, [["userId", "x", "y", "online", "notification", "color"]])
    backend.set_rows(2, 1, [[1, 10, 20, 1, 0, "red"], [2, -3, 4, 0, 5, "blue"]])
    assert backend.row_count() == 3

    assert backend.get_rows(2, 1, 2, 6) == [[1, 10, 20, 1, 0, "red"], [2, -3, 4, 0, 5, "blue"]]
    assert backend.get_rows(2, 1, 2, 1) == [[1], [2]]
    assert backend.get_cell(3, 6) == "blue"

    # Fuera de los datos se lee vacío
    assert backend.get_rows(3, 5, 2, 3) == [[5, "blue", ""], ["", "", ""]]

    # Escritura parcial de columnas
    backend.set_rows(2, 6, [["green"]])
    assert backend.get_rows(2, 1, 1, 6) == [[1, 10, 20, 1, 0, "green"]]

    # Una fila en blanco al final no cuenta
    backend.set_rows(3, 1, [["", "", "", "", "", ""]])
    assert backend.row_count() == 2


def test_contract_memory_backend():
    assert_backend_contract(InMemoryBackend())


def test_contract_json_backend(tmp_path):
    assert_backend_contract(JsonFileBackend(base_path=tmp_path, table="contract", create=True))


def test_memory_backend_rejects_zero_based_addressing():
    with pytest.raises(ValueError):
        InMemoryBackend().get_rows(0, 1, 1, 1)


def test_memory_backend_unavailable():
    backend = InMemoryBackend()
    backend.available = False
    with pytest.raises(BackendUnavailableError):
        backend.row_count()


def test_contract_db_backend_if_available():
    dsn = os.getenv("DATABASE_URL_TEST") or os.getenv("DATABASE_URL")
    if not dsn:
        pytest.skip("No DATABASE_URL_TEST/DATABASE_URL disponible para contract test de DB.")
    table = f"contract_{os.getpid()}"
    try:
        backend = DatabaseBackend(dsn=dsn, table=table, run_migrations=True)
        backend.apply_migrations()
    except (RuntimeError, BackendUnavailableError) as exc:
        pytest.skip(f"Dependencia/DB no disponible: {exc}")
    assert_backend_contract(backend)
