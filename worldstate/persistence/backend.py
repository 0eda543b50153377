"""Contrato de persistencia tabular: filas y columnas 1-based con una fila de cabecera."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BackendError(Exception):
    """Fallo del backend durante una lectura o escritura."""


class BackendUnavailableError(BackendError):
    """La tabla no existe, no se puede abrir o la conexión ha fallado."""


class PersistenceBackend(ABC):
    """Interfaz de almacenamiento desacoplada del almacén de jugadores.

    Cada llamada individual es atómica desde el punto de vista del backend;
    una secuencia de llamadas no lo es.
    """

    @abstractmethod
    def get_rows(self, start_row: int, start_col: int, row_count: int, col_count: int) -> list[list[Any]]:
        """Devuelve un bloque row_count x col_count. Las celdas sin dato se leen como ""."""

    @abstractmethod
    def get_cell(self, row: int, col: int) -> Any:
        """Devuelve el valor crudo de una celda."""

    @abstractmethod
    def set_rows(self, start_row: int, start_col: int, values: list[list[Any]]) -> None:
        """Escribe un bloque de valores en una sola operación."""

    @abstractmethod
    def row_count(self) -> int:
        """Índice de la última fila con datos (cabecera incluida); 0 si la tabla está vacía."""


def validate_range(start_row: int, start_col: int, row_count: int = 1, col_count: int = 1) -> None:
    """Valida un rango 1-based; los backends lo usan antes de tocar el almacenamiento."""
    if start_row < 1 or start_col < 1:
        raise ValueError(f"Rango fuera de la tabla: fila={start_row}, columna={start_col}")
    if row_count < 0 or col_count < 0:
        raise ValueError(f"Tamaño de rango inválido: {row_count}x{col_count}")


def is_blank_row(row: list[Any]) -> bool:
    return all(cell in ("", None) for cell in row)


def slice_block(
    rows: list[list[Any]], start_row: int, start_col: int, row_count: int, col_count: int
) -> list[list[Any]]:
    """Recorta un bloque de una tabla en memoria rellenando con "" lo que no existe."""
    block: list[list[Any]] = []
    for r in range(start_row - 1, start_row - 1 + row_count):
        source = rows[r] if r < len(rows) else []
        out = []
        for c in range(start_col - 1, start_col - 1 + col_count):
            out.append(source[c] if c < len(source) else "")
        block.append(out)
    return block


def write_block(rows: list[list[Any]], start_row: int, start_col: int, values: list[list[Any]]) -> None:
    """Escribe un bloque sobre una tabla en memoria, ampliándola si hace falta."""
    for offset, new_values in enumerate(values):
        r = start_row - 1 + offset
        while len(rows) <= r:
            rows.append([])
        target = rows[r]
        end = start_col - 1 + len(new_values)
        if len(target) < end:
            target.extend([""] * (end - len(target)))
        target[start_col - 1:end] = list(new_values)


def last_non_blank(rows: list[list[Any]]) -> int:
    for index in range(len(rows), 0, -1):
        if not is_blank_row(rows[index - 1]):
            return index
    return 0
