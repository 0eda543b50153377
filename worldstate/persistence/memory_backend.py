"""Implementación en memoria de PersistenceBackend."""

from __future__ import annotations

import copy
from threading import Lock
from typing import Any

from .backend import (
    BackendUnavailableError,
    PersistenceBackend,
    last_non_blank,
    slice_block,
    validate_range,
    write_block,
)


class InMemoryBackend(PersistenceBackend):
    """Tabla en memoria; un lock serializa cada llamada individual."""

    def __init__(self, rows: list[list[Any]] | None = None) -> None:
        self._rows: list[list[Any]] = [list(r) for r in (rows or [])]
        self._lock = Lock()
        self.available = True

    def _check(self) -> None:
        if not self.available:
            raise BackendUnavailableError("Tabla en memoria no disponible")

    def get_rows(self, start_row: int, start_col: int, row_count: int, col_count: int) -> list[list[Any]]:
        validate_range(start_row, start_col, row_count, col_count)
        with self._lock:
            self._check()
            return slice_block(self._rows, start_row, start_col, row_count, col_count)

    def get_cell(self, row: int, col: int) -> Any:
        return self.get_rows(row, col, 1, 1)[0][0]

    def set_rows(self, start_row: int, start_col: int, values: list[list[Any]]) -> None:
        validate_range(start_row, start_col)
        with self._lock:
            self._check()
            write_block(self._rows, start_row, start_col, values)

    def row_count(self) -> int:
        with self._lock:
            self._check()
            return last_non_blank(self._rows)

    def snapshot(self) -> list[list[Any]]:
        """Copia profunda de todas las filas (cabecera incluida)."""
        with self._lock:
            return copy.deepcopy(self._rows)
