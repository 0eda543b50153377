"""Implementación PostgreSQL de PersistenceBackend."""

from __future__ import annotations

import importlib
import json
import os
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Iterator

from .backend import (
    BackendError,
    BackendUnavailableError,
    PersistenceBackend,
    is_blank_row,
    slice_block,
    validate_range,
    write_block,
)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DatabaseBackend(PersistenceBackend):
    """Tabla direccionable por fila sobre PostgreSQL: una fila SQL por fila de tabla.

    El constructor no abre conexiones: las migraciones se aplican en la primera
    operación, de modo que una base caída se ve como BackendUnavailableError
    desde el almacén y no al construirlo.
    """

    def __init__(self, dsn: str | None = None, table: str | None = None, run_migrations: bool = True) -> None:
        self._dsn = (dsn or os.getenv("DATABASE_URL", "")).strip()
        if not self._dsn:
            raise RuntimeError("DATABASE_URL no configurada para WORLDSTATE_BACKEND=db")
        self._table = (table or os.getenv("WORLDSTATE_TABLE", "players")).strip() or "players"
        try:
            self._psycopg = importlib.import_module("psycopg")
        except ModuleNotFoundError as exc:
            raise RuntimeError(
                "Falta dependencia 'psycopg'. Instala el driver PostgreSQL para usar WORLDSTATE_BACKEND=db."
            ) from exc
        self._schema_ready = not run_migrations
        self._schema_lock = Lock()

    @contextmanager
    def _connection(self):
        try:
            conn = self._psycopg.connect(self._dsn, autocommit=False)
        except self._psycopg.Error as exc:
            raise BackendUnavailableError(f"No se pudo conectar a la base de datos: {exc}") from exc
        try:
            self._ensure_schema(conn)
            yield conn
            conn.commit()
        except self._psycopg.OperationalError as exc:
            conn.rollback()
            raise BackendUnavailableError(f"Conexión perdida: {exc}") from exc
        except self._psycopg.Error as exc:
            conn.rollback()
            raise BackendError(str(exc)) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _ensure_schema(self, conn) -> None:
        if self._schema_ready:
            return
        with self._schema_lock:
            if self._schema_ready:
                return
            self._migrate(conn)
            conn.commit()
            self._schema_ready = True

    def apply_migrations(self) -> None:
        """Fuerza la aplicación de migraciones pendientes (normalmente ocurre en la primera operación)."""
        self._schema_ready = False
        with self._connection():
            pass

    @staticmethod
    def _statements(script: str) -> Iterator[str]:
        """Sentencias de un script SQL; cada una termina en una línea acabada en ';'."""
        buffer: list[str] = []
        for line in script.splitlines():
            if not buffer and not line.strip():
                continue
            buffer.append(line)
            if line.rstrip().endswith(";"):
                yield "\n".join(buffer).strip()
                buffer = []
        tail = "\n".join(buffer).strip()
        if tail:
            yield tail

    def _migrate(self, conn) -> None:
        migrations_dir = PROJECT_ROOT / "migrations"
        scripts = sorted(migrations_dir.glob("*.sql")) if migrations_dir.is_dir() else []
        with conn.cursor() as cur:
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS world_schema_versions (
                    table_name VARCHAR NOT NULL,
                    version VARCHAR NOT NULL,
                    applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                    PRIMARY KEY (table_name, version)
                );
                """
            )
            cur.execute("SELECT version FROM world_schema_versions WHERE table_name = %s", (self._table,))
            applied = {r[0] for r in cur.fetchall()}
            for script in scripts:
                if script.name in applied:
                    continue
                for statement in self._statements(script.read_text(encoding="utf-8")):
                    cur.execute(statement)
                cur.execute(
                    "INSERT INTO world_schema_versions (table_name, version, applied_at) VALUES (%s, %s, %s)",
                    (self._table, script.name, _utc_now()),
                )

    @staticmethod
    def _decode_cells(raw: Any) -> list[Any]:
        if isinstance(raw, str):
            raw = json.loads(raw)
        return list(raw) if isinstance(raw, list) else []

    def get_rows(self, start_row: int, start_col: int, row_count: int, col_count: int) -> list[list[Any]]:
        validate_range(start_row, start_col, row_count, col_count)
        if row_count == 0:
            return []
        end_row = start_row + row_count - 1
        with self._connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT row_number, cells FROM world_rows
                    WHERE table_name = %s AND row_number BETWEEN %s AND %s
                    """,
                    (self._table, start_row, end_row),
                )
                found = {int(r[0]): self._decode_cells(r[1]) for r in cur.fetchall()}
        # Bloque denso relativo a start_row; las filas ausentes se leen vacías.
        dense = [found.get(n, []) for n in range(start_row, end_row + 1)]
        return slice_block(dense, 1, start_col, row_count, col_count)

    def get_cell(self, row: int, col: int) -> Any:
        return self.get_rows(row, col, 1, 1)[0][0]

    def set_rows(self, start_row: int, start_col: int, values: list[list[Any]]) -> None:
        validate_range(start_row, start_col)
        with self._connection() as conn:
            with conn.cursor() as cur:
                now = _utc_now()
                for offset, new_values in enumerate(values):
                    row_number = start_row + offset
                    cur.execute(
                        "SELECT cells FROM world_rows WHERE table_name = %s AND row_number = %s FOR UPDATE",
                        (self._table, row_number),
                    )
                    existing = cur.fetchone()
                    merged = [self._decode_cells(existing[0]) if existing else []]
                    write_block(merged, 1, start_col, [new_values])
                    cur.execute(
                        """
                        INSERT INTO world_rows (table_name, row_number, cells, updated_at)
                        VALUES (%s, %s, %s::jsonb, %s)
                        ON CONFLICT (table_name, row_number)
                        DO UPDATE SET cells = excluded.cells, updated_at = excluded.updated_at
                        """,
                        (self._table, row_number, json.dumps(merged[0], ensure_ascii=False), now),
                    )

    def row_count(self) -> int:
        with self._connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT row_number, cells FROM world_rows WHERE table_name = %s ORDER BY row_number DESC",
                    (self._table,),
                )
                for row_number, cells in cur.fetchall():
                    if not is_blank_row(self._decode_cells(cells)):
                        return int(row_number)
        return 0
