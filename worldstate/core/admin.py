"""Vía administrativa: alta, baja y color de jugadores. Fuera del camino de update()."""

from __future__ import annotations

from ..logging_config import get_logger
from ..models import COL_COLOR, COLUMNS, HEADER_ROW, NUM_COLUMNS
from ..persistence.backend import PersistenceBackend
from .store import locate_row, round_position


def ensure_header(backend: PersistenceBackend) -> bool:
    """Escribe la cabecera si la tabla está vacía. Devuelve True si la ha escrito."""
    if backend.row_count() >= HEADER_ROW:
        return False
    backend.set_rows(HEADER_ROW, 1, [list(COLUMNS)])
    get_logger("Admin").info("Cabecera creada")
    return True


def provision_player(backend: PersistenceBackend, user_id: int, color: str, x: float = 0, y: float = 0) -> int:
    """Añade un jugador nuevo al final de la tabla y devuelve su fila.

    Los jugadores nacen offline y sin notificación pendiente.
    """
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise ValueError(f"user_id debe ser entero: {user_id!r}")
    if not color:
        raise ValueError("color no puede estar vacío")
    ensure_header(backend)
    if locate_row(backend, user_id) is not None:
        raise ValueError(f"userId {user_id} ya existe")
    row_number = backend.row_count() + 1
    backend.set_rows(row_number, 1, [[user_id, round_position(x), round_position(y), 0, 0, color]])
    get_logger("Admin").info("Jugador %s dado de alta en fila %d con color %s", user_id, row_number, color)
    return row_number


def assign_color(backend: PersistenceBackend, user_id: int, color: str) -> bool:
    """Cambia solo la celda de color de un jugador existente."""
    if not color:
        raise ValueError("color no puede estar vacío")
    row_number = locate_row(backend, user_id)
    if row_number is None:
        return False
    backend.set_rows(row_number, COL_COLOR, [[color]])
    get_logger("Admin").info("Color de %s -> %s", user_id, color)
    return True


def remove_player(backend: PersistenceBackend, user_id: int) -> bool:
    """Vacía la fila del jugador; las filas siguientes no se desplazan."""
    row_number = locate_row(backend, user_id)
    if row_number is None:
        return False
    backend.set_rows(row_number, 1, [[""] * NUM_COLUMNS])
    get_logger("Admin").info("Jugador %s eliminado (fila %d)", user_id, row_number)
    return True
