"""Logging centralizado: terminal (con colores) + archivo para la CLI, solo stderr para la API."""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar, Token
from pathlib import Path

import colorama

LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOGGER_NAME = "worldstate"
_caller_var: ContextVar[str | None] = ContextVar("caller", default=None)

# Logger base; se le añaden handlers en setup_*_logging
_logger: logging.Logger | None = None


def set_caller(caller: str | int | None) -> Token:
    """Establece el jugador que origina la operación actual (contextvar). Devuelve el token para reset_caller."""
    return _caller_var.set(None if caller is None else str(caller))


def reset_caller(token: Token) -> None:
    _caller_var.reset(token)


def get_caller() -> str | None:
    return _caller_var.get()


class PlainFormatter(logging.Formatter):
    """Formato sin códigos de color (para archivo y API)."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s | %(levelname)s | caller=%(caller)s | %(component)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        record.caller = getattr(record, "caller", "-")
        record.component = getattr(record, "component", "-")
        return super().format(record)


class ColoredFormatter(PlainFormatter):
    """Formato con códigos ANSI por nivel (para terminal)."""

    COLORS = {
        logging.DEBUG: colorama.Fore.CYAN,
        logging.INFO: colorama.Fore.GREEN,
        logging.WARNING: colorama.Fore.YELLOW,
        logging.ERROR: colorama.Fore.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        color = self.COLORS.get(record.levelno, "")
        return f"{color}{base}{colorama.Style.RESET_ALL}"


def _level_from_env(default: str) -> int:
    name = os.getenv("WORLDSTATE_LOG_LEVEL", default).upper()
    return getattr(logging, name, getattr(logging, default))


def setup_cli_logging() -> logging.Logger:
    """Configura logging para la CLI: archivo logs/worldstate.log y terminal con colores."""
    global _logger
    colorama.just_fix_windows_console()
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_level = _level_from_env("INFO")

    _logger = logging.getLogger(LOGGER_NAME)
    _logger.setLevel(log_level)
    _logger.handlers.clear()

    file_handler = logging.FileHandler(LOG_DIR / "worldstate.log", encoding="utf-8")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(PlainFormatter())
    _logger.addHandler(file_handler)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(ColoredFormatter())
    _logger.addHandler(stream_handler)

    for name in ("uvicorn.access", "psycopg"):
        logging.getLogger(name).setLevel(logging.WARNING)
    return _logger


def setup_api_logging() -> None:
    """Configura logging mínimo para modo API: solo stderr, nivel WARNING por defecto.
    Los fallos del backend (ERROR) y las filas malformadas (WARNING) sí se muestran."""
    global _logger
    log_level = _level_from_env("WARNING")

    _logger = logging.getLogger(LOGGER_NAME)
    _logger.setLevel(log_level)
    _logger.handlers.clear()

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(PlainFormatter())
    _logger.addHandler(stream_handler)

    for name in ("uvicorn.access", "psycopg"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(component: str) -> logging.LoggerAdapter:
    """Devuelve un LoggerAdapter con caller y component."""
    extra = {"caller": get_caller() or "-", "component": component}
    if _logger is None:
        # Sin setup previo (p. ej. tests): logger hijo sin handlers propios, propaga a root
        return logging.LoggerAdapter(logging.getLogger(f"{LOGGER_NAME}.{component}"), extra)
    return logging.LoggerAdapter(_logger, extra)
