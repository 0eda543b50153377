"""API HTTP FastAPI para el roster de jugadores."""

from .app import app
from .dependencies import get_store

__all__ = ["app", "get_store"]
