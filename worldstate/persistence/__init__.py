"""Capa de persistencia (memory/json/db) con direccionamiento fila/columna."""

from .backend import BackendError, BackendUnavailableError, PersistenceBackend
from .factory import create_backend

__all__ = ["BackendError", "BackendUnavailableError", "PersistenceBackend", "create_backend"]
