"""Tests for compdoc.logging."""

from __future__ import annotations

import logging
from pathlib import Path

from compdoc.logging import configure_logging, get_logger, log_duration


def test_get_logger_nests_under_package() -> None:
    assert get_logger().name == "compdoc"
    assert get_logger("pipeline").name == "compdoc.pipeline"


def test_configure_logging_resets_handlers(tmp_path: Path) -> None:
    log_file = tmp_path / "compdoc.log"

    configure_logging(verbose=True, log_file=log_file)
    logger = configure_logging(verbose=True, log_file=log_file)

    try:
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        assert logger.propagate is False

        with log_duration(get_logger("test"), "step"):
            pass
        for handler in logger.handlers:
            handler.flush()

        assert "compdoc.test: step:" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


def test_configure_logging_defaults_to_info() -> None:
    logger = configure_logging()
    try:
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
