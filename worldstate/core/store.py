"""Almacén de registros de jugador sobre un PersistenceBackend. Sin estado propio entre llamadas."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from ..logging_config import get_logger, reset_caller, set_caller
from ..models import (
    COL_COLOR,
    COL_NOTIFICATION,
    COL_ONLINE,
    COL_USER_ID,
    COL_X,
    COL_Y,
    FIRST_DATA_ROW,
    NUM_COLUMNS,
    POSITION_MAX,
    POSITION_MIN,
    PlayerRecord,
    PlayerUpdate,
)
from ..persistence.backend import BackendError, BackendUnavailableError, PersistenceBackend, is_blank_row

T = TypeVar("T")


class ErrorKind(str, Enum):
    BACKEND_UNAVAILABLE = "backend_unavailable"
    BACKEND_ERROR = "backend_error"
    KEY_NOT_FOUND = "key_not_found"
    MALFORMED_ROW = "malformed_row"
    INVALID_RECORD = "invalid_record"


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Resultado explícito de una operación: valor o tipo de error."""
    ok: bool
    value: T | None = None
    error: ErrorKind | None = None
    detail: str = ""

    @classmethod
    def success(cls, value: T) -> "StoreResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ErrorKind, detail: str = "") -> "StoreResult[T]":
        return cls(ok=False, error=error, detail=detail)


class MalformedRowError(ValueError):
    """Fila con campos numéricos ausentes o no parseables (solo en modo estricto)."""

    def __init__(self, row_number: int, field: str, value: Any) -> None:
        super().__init__(f"Fila {row_number}: valor no válido en {field}: {value!r}")
        self.row_number = row_number
        self.field = field


def _parse_number(value: Any) -> int | float | None:
    """Número a partir de un valor crudo de celda; None si no es numérico o no es finito."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            parsed = float(text)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def _parse_int(value: Any) -> int | None:
    """Entero con redondeo half-up, igual que en escritura."""
    number = _parse_number(value)
    if isinstance(number, float):
        return math.floor(number + 0.5)
    return number


def _parse_key(value: Any) -> int | None:
    """userId almacenado; solo valores enteros (7, 7.0, "7"). "7.9" no es una clave."""
    number = _parse_number(value)
    if isinstance(number, float):
        return int(number) if number.is_integer() else None
    return number


def _is_one(value: Any) -> bool:
    """True solo si el valor almacenado es numéricamente 1."""
    if isinstance(value, (bool, int, float)):
        return value == 1
    if isinstance(value, str):
        try:
            return float(value.strip()) == 1
        except ValueError:
            return False
    return False


def locate_row(backend: PersistenceBackend, user_id: int) -> int | None:
    """Primera fila cuyo userId coincide (búsqueda lineal sobre la columna clave)."""
    last_row = backend.row_count()
    if last_row < FIRST_DATA_ROW:
        return None
    keys = backend.get_rows(FIRST_DATA_ROW, COL_USER_ID, last_row - FIRST_DATA_ROW + 1, 1)
    for offset, (raw_key,) in enumerate(keys):
        if _parse_key(raw_key) == user_id:
            return FIRST_DATA_ROW + offset
    return None


def round_position(value: float) -> int:
    """Redondeo half-up (como Math.round del cliente) acotado al rango de 16 bits."""
    rounded = math.floor(value + 0.5)
    return max(POSITION_MIN, min(POSITION_MAX, rounded))


def _parse_position(value: Any) -> int | None:
    number = _parse_number(value)
    return None if number is None else round_position(number)


class PlayerRecordStore:
    """Traduce entre PlayerRecord y filas crudas, resuelve userId -> fila y aplica updates parciales.

    No guarda caché ni locks: todo el estado vive en el backend. La relectura de color
    y la escritura de la fila dentro de update() no son atómicas como par; dos updates
    concurrentes a la misma clave terminan en last-writer-wins sobre la fila entera.
    """

    def __init__(self, backend: PersistenceBackend, strict_rows: bool = False) -> None:
        self._backend = backend
        self._strict_rows = strict_rows

    @property
    def backend(self) -> PersistenceBackend:
        return self._backend

    def _deserialize(self, row_number: int, row: list[Any]) -> PlayerRecord:
        logger = get_logger("Store")
        parsed: dict[str, int] = {}
        columns = (
            ("userId", COL_USER_ID, _parse_key),
            ("x", COL_X, _parse_position),
            ("y", COL_Y, _parse_position),
            ("notification", COL_NOTIFICATION, _parse_int),
        )
        for field, col, parse in columns:
            raw = row[col - 1]
            value = parse(raw)
            if value is None:
                if self._strict_rows:
                    raise MalformedRowError(row_number, field, raw)
                logger.warning("Fila %d: %s no válido (%r), se usa 0", row_number, field, raw)
                value = 0
            parsed[field] = value
        color = row[COL_COLOR - 1]
        return PlayerRecord(
            user_id=parsed["userId"],
            x=parsed["x"],
            y=parsed["y"],
            online=_is_one(row[COL_ONLINE - 1]),
            notification=parsed["notification"],
            color="" if color is None else str(color),
        )

    def try_read_all(self) -> StoreResult[list[PlayerRecord]]:
        """Lee todas las filas bajo la cabecera, en orden de tabla, como lista materializada."""
        logger = get_logger("Store")
        try:
            last_row = self._backend.row_count()
            if last_row < FIRST_DATA_ROW:
                return StoreResult.success([])
            rows = self._backend.get_rows(FIRST_DATA_ROW, 1, last_row - FIRST_DATA_ROW + 1, NUM_COLUMNS)
        except BackendUnavailableError as exc:
            logger.error("read_all: backend no disponible: %s", exc)
            return StoreResult.failure(ErrorKind.BACKEND_UNAVAILABLE, str(exc))
        except BackendError as exc:
            logger.error("read_all: fallo del backend: %s", exc)
            return StoreResult.failure(ErrorKind.BACKEND_ERROR, str(exc))

        records: list[PlayerRecord] = []
        for offset, row in enumerate(rows):
            if is_blank_row(row):
                continue
            try:
                records.append(self._deserialize(FIRST_DATA_ROW + offset, row))
            except MalformedRowError as exc:
                logger.error("read_all: %s", exc)
                return StoreResult.failure(ErrorKind.MALFORMED_ROW, str(exc))
        return StoreResult.success(records)

    def read_all(self) -> list[PlayerRecord]:
        """Roster completo; lista vacía si el backend falla (el fallo queda en el log)."""
        result = self.try_read_all()
        return result.value if result.ok else []

    def try_update(self, record: PlayerUpdate | PlayerRecord) -> StoreResult[PlayerRecord]:
        """Sobrescribe x, y, online y notification de un registro existente conservando su color.

        Acepta un PlayerRecord completo; su color se ignora.
        """
        token = set_caller(record.user_id)
        try:
            return self._apply_update(record)
        finally:
            reset_caller(token)

    def _apply_update(self, record: PlayerUpdate | PlayerRecord) -> StoreResult[PlayerRecord]:
        logger = get_logger("Store")
        if not (math.isfinite(record.x) and math.isfinite(record.y)):
            logger.warning("update: posición no finita (%r, %r)", record.x, record.y)
            return StoreResult.failure(ErrorKind.INVALID_RECORD, "x/y deben ser finitos")

        x = round_position(record.x)
        y = round_position(record.y)
        online = 1 if record.online else 0
        notification = int(record.notification)
        try:
            row_number = locate_row(self._backend, record.user_id)
            if row_number is None:
                logger.info("update: userId %s no encontrado", record.user_id)
                return StoreResult.failure(ErrorKind.KEY_NOT_FOUND, f"userId {record.user_id} no existe")
            # El color es del almacén: se relee y se reinyecta en la fila completa.
            color = self._backend.get_cell(row_number, COL_COLOR)
            self._backend.set_rows(
                row_number, 1, [[record.user_id, x, y, online, notification, color]]
            )
        except BackendUnavailableError as exc:
            logger.error("update: backend no disponible: %s", exc)
            return StoreResult.failure(ErrorKind.BACKEND_UNAVAILABLE, str(exc))
        except BackendError as exc:
            logger.error("update: fallo del backend: %s", exc)
            return StoreResult.failure(ErrorKind.BACKEND_ERROR, str(exc))

        logger.debug("update: fila %d -> x=%d y=%d online=%d", row_number, x, y, online)
        return StoreResult.success(
            PlayerRecord(
                user_id=record.user_id,
                x=x,
                y=y,
                online=bool(online),
                notification=notification,
                color="" if color is None else str(color),
            )
        )

    def update(self, record: PlayerUpdate | PlayerRecord) -> bool:
        """True solo si la fila se localizó y se escribió."""
        return self.try_update(record).ok
