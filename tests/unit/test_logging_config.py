"""Tests de logging_config: formato con caller y component."""

import logging

from worldstate import logging_config


def test_plain_formatter_fills_missing_fields():
    record = logging.LogRecord("worldstate.x", logging.INFO, __file__, 1, "hola", None, None)
    out = logging_config.PlainFormatter().format(record)
    assert "caller=-" in out
    assert "| - | hola" in out


def test_get_logger_carries_component_and_caller(caplog):
    token = logging_config.set_caller(7)
    try:
        logger = logging_config.get_logger("Store")
        with caplog.at_level(logging.INFO):
            logger.info("mensaje")
    finally:
        logging_config.reset_caller(token)
    assert logging_config.get_caller() is None
    (record,) = [r for r in caplog.records if r.getMessage() == "mensaje"]
    assert record.component == "Store"
    assert record.caller == "7"


def test_colored_formatter_wraps_with_reset():
    record = logging.LogRecord("worldstate.x", logging.ERROR, __file__, 1, "fallo", None, None)
    out = logging_config.ColoredFormatter().format(record)
    assert out.startswith(logging_config.ColoredFormatter.COLORS[logging.ERROR])
    assert "fallo" in out
