"""Dependencias FastAPI: almacén de jugadores singleton."""

from ..core import create_store

_store = None


def get_store():
    global _store
    if _store is None:
        _store = create_store()
    return _store
