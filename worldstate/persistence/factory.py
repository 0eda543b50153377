"""Factory de backend por variable de entorno."""

from __future__ import annotations

import os

from .backend import PersistenceBackend
from .db_backend import DatabaseBackend
from .json_backend import JsonFileBackend
from .memory_backend import InMemoryBackend


def create_backend() -> PersistenceBackend:
    mode = os.getenv("WORLDSTATE_BACKEND", "json").strip().lower() or "json"
    if mode == "db":
        return DatabaseBackend()
    if mode == "json":
        return JsonFileBackend()
    if mode == "memory":
        return InMemoryBackend()
    raise RuntimeError(f"WORLDSTATE_BACKEND inválido: {mode!r}. Usa 'memory', 'json' o 'db'.")
