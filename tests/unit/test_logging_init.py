from __future__ import annotations

import logging
from io import StringIO

import dimcheck.logging.init as log_init
from dimcheck.logging.init import LabeledFormatter, get_logger, log_summary, setup_logging


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == "dimcheck"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    handler = logger.handlers[0]
    assert isinstance(handler, logging.StreamHandler)
    assert isinstance(handler.formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    first = setup_logging()
    second = setup_logging()
    assert first is second
    assert len(second.handlers) == 1


def test_setup_logging_debug_lowers_levels():
    logger = setup_logging(debug=True)
    assert logger.level == logging.DEBUG
    assert all(h.level == logging.DEBUG for h in logger.handlers)


def test_labeled_prefixes():
    captured = StringIO()
    logger = logging.getLogger("test_dimcheck_labels")
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logging.addLevelName(log_init.SUMMARY_LEVEL, "SUMMARY")
    handler = logging.StreamHandler(captured)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    logger.log(log_init.SUMMARY_LEVEL, "Test summary message")

    lines = captured.getvalue().strip().split("\n")
    assert lines == [
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY Test summary message",
    ]


def test_module_loggers_propagate_to_app_logger(capsys):
    setup_logging()
    logging.getLogger("dimcheck.services.orchestrator").info("child message")
    assert "INFO child message" in capsys.readouterr().out


def test_get_logger_and_log_summary(capsys):
    logger = get_logger()
    assert logger is setup_logging()
    log_summary("images=0")
    assert "SUMMARY images=0" in capsys.readouterr().out


def test_reset_logging_clears_state():
    setup_logging()
    log_init.reset_logging()
    assert log_init._logger is None
