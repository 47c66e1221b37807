"""Tests for common.logging_config."""

import logging

import pytest

from common.logging_config import setup_logging


@pytest.fixture
def restore_root():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_console_handler(restore_root):
    logger = setup_logging(logging.DEBUG)
    assert logger is restore_root
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_file_handler(restore_root, tmp_path):
    log_file = tmp_path / "logs" / "app.log"
    logger = setup_logging(log_file=log_file)
    logging.getLogger("chatbot.pipeline").info("turn answered")
    for handler in logger.handlers:
        handler.flush()
    assert "chatbot.pipeline - INFO - turn answered" in log_file.read_text(encoding="utf-8")
    for handler in logger.handlers:
        handler.close()


def test_quiets_third_party(restore_root):
    setup_logging(logging.DEBUG)
    assert logging.getLogger("httpx").level == logging.WARNING
