"""Implementación JSON de PersistenceBackend: un documento por tabla."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from threading import Lock
from typing import Any

from .backend import (
    BackendError,
    BackendUnavailableError,
    PersistenceBackend,
    last_non_blank,
    slice_block,
    validate_range,
    write_block,
)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class JsonFileBackend(PersistenceBackend):
    """Persistencia en filesystem: <base_path>/<table>.json con la lista de filas."""

    def __init__(self, base_path: Path | None = None, table: str | None = None, create: bool = False) -> None:
        self._root = self._resolve_base_path(base_path)
        self._table = (table or os.getenv("WORLDSTATE_TABLE", "players")).strip() or "players"
        self._lock = Lock()
        if create:
            self.create_table()

    @staticmethod
    def _resolve_base_path(base_path: Path | None = None) -> Path:
        if base_path is not None:
            return base_path
        configured = os.getenv("WORLDSTATE_DATA_DIR", "").strip()
        if configured:
            candidate = Path(configured)
            return candidate if candidate.is_absolute() else (PROJECT_ROOT / candidate)
        return PROJECT_ROOT / "data"

    def create_table(self) -> bool:
        """Crea el fichero de la tabla vacío si no existe. Devuelve True si lo ha creado."""
        with self._lock:
            if self.path.exists():
                return False
            try:
                self._root.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise BackendUnavailableError(f"No se pudo crear {self._root}: {exc}") from exc
            self._write_rows([])
            return True

    @property
    def path(self) -> Path:
        return self._root / f"{self._table}.json"

    def _read_rows(self) -> list[list[Any]]:
        if not self.path.exists():
            raise BackendUnavailableError(f"Tabla no encontrada: {self.path}")
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise BackendUnavailableError(f"No se pudo abrir {self.path}: {exc}") from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise BackendError(f"Tabla corrupta en {self.path}: {exc}") from exc
        if not isinstance(data, list):
            raise BackendError(f"Tabla corrupta en {self.path}: se esperaba una lista de filas")
        return [list(r) if isinstance(r, list) else [] for r in data]

    def _write_rows(self, rows: list[list[Any]]) -> None:
        # Escritura a temporal + os.replace: un lector nunca ve el fichero a medias.
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self._root, prefix=f".{self._table}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(rows, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            raise BackendUnavailableError(f"No se pudo escribir {self.path}: {exc}") from exc

    def get_rows(self, start_row: int, start_col: int, row_count: int, col_count: int) -> list[list[Any]]:
        validate_range(start_row, start_col, row_count, col_count)
        with self._lock:
            return slice_block(self._read_rows(), start_row, start_col, row_count, col_count)

    def get_cell(self, row: int, col: int) -> Any:
        return self.get_rows(row, col, 1, 1)[0][0]

    def set_rows(self, start_row: int, start_col: int, values: list[list[Any]]) -> None:
        validate_range(start_row, start_col)
        with self._lock:
            rows = self._read_rows()
            write_block(rows, start_row, start_col, values)
            self._write_rows(rows)

    def row_count(self) -> int:
        with self._lock:
            return last_non_blank(self._read_rows())
