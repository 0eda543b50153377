"""Modelo de dominio del jugador y contrato de columnas de la tabla."""

from __future__ import annotations

from dataclasses import dataclass

# Orden posicional de columnas (1-based). Es contrato con el backend: no reordenar sin migración.
COLUMNS = ("userId", "x", "y", "online", "notification", "color")
COL_USER_ID = 1
COL_X = 2
COL_Y = 3
COL_ONLINE = 4
COL_NOTIFICATION = 5
COL_COLOR = 6
NUM_COLUMNS = len(COLUMNS)

HEADER_ROW = 1
FIRST_DATA_ROW = 2

POSITION_MIN = -32768
POSITION_MAX = 32767


@dataclass(frozen=True)
class PlayerRecord:
    """Estado persistido de un jugador, identificado solo por user_id."""
    user_id: int
    x: int = 0
    y: int = 0
    online: bool = False
    notification: int = 0
    color: str = ""

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "x": self.x,
            "y": self.y,
            "online": self.online,
            "notification": self.notification,
            "color": self.color,
        }


@dataclass(frozen=True)
class PlayerUpdate:
    """Campos propiedad del cliente para update(); la posición puede ser fraccionaria."""
    user_id: int
    x: float = 0.0
    y: float = 0.0
    online: bool = False
    notification: int = 0
