"""Núcleo: almacén de registros de jugador y operaciones administrativas."""

import os

from ..persistence import PersistenceBackend, create_backend
from .store import ErrorKind, PlayerRecordStore, StoreResult


def create_store(backend: PersistenceBackend | None = None) -> PlayerRecordStore:
    """Crea el almacén sobre el backend dado o el configurado por entorno."""
    strict = os.getenv("WORLDSTATE_STRICT_ROWS", "").strip().lower() in ("true", "1", "yes")
    return PlayerRecordStore(backend or create_backend(), strict_rows=strict)


__all__ = ["ErrorKind", "PlayerRecordStore", "StoreResult", "create_store"]
