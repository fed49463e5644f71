from __future__ import annotations

import logging
from io import StringIO

from surebet_dashboard.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    setup_logging,
)


def _capture_logger(name: str) -> tuple[logging.Logger, StringIO]:
    captured = StringIO()
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(captured)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger, captured


def test_setup_logging_configures_single_stdout_handler():
    logger = setup_logging()
    assert logger.name == LOGGER_NAME
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_setup_logging_is_idempotent_and_adjusts_level():
    first = setup_logging()
    second = setup_logging(logging.DEBUG)
    assert first is second
    assert len(second.handlers) == 1
    assert second.level == logging.DEBUG
    assert get_logger() is first


def test_labeled_prefixes():
    logger, captured = _capture_logger("test_surebet_labels")
    logger.info("info message")
    logger.warning("warn message")
    logger.error("error message")
    logger.log(SUMMARY_LEVEL, "scope=all sheets=0")

    lines = captured.getvalue().splitlines()
    assert lines == [
        "INFO info message",
        "WARN warn message",
        "ERROR error message",
        "SUMMARY scope=all sheets=0",
    ]


def test_exception_traceback_is_appended():
    logger, captured = _capture_logger("test_surebet_exc")
    try:
        raise ValueError("boom")
    except ValueError:
        logger.exception("failed")
    text = captured.getvalue()
    assert text.startswith("ERROR failed\n")
    assert "ValueError: boom" in text


def test_log_summary_writes_summary_label(capsys):
    setup_logging()
    log_summary("scope=sheet:1 sheets=1")
    assert "SUMMARY scope=sheet:1 sheets=1" in capsys.readouterr().out


def test_module_loggers_propagate_to_app_logger(capsys):
    setup_logging()
    logging.getLogger("surebet_dashboard.sheets.client").warning("tab skipped")
    assert "WARN tab skipped" in capsys.readouterr().out
