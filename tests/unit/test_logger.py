"""
Tests for logging setup.
"""

import logging

import pytest

from huddle.utils.logger import LOG_FILE, NAMESPACE, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    setup_logging()


def test_subsystem_loggers_share_namespace():
    logger = get_logger("bids")

    assert logger.name == "huddle.bids"
    assert logger.parent is logging.getLogger(NAMESPACE)


def test_setup_replaces_handlers():
    setup_logging()
    root = setup_logging(level=logging.WARNING)

    assert len(root.handlers) == 1
    assert root.level == logging.WARNING


def test_log_dir_writes_file(tmp_path):
    log_dir = tmp_path / "logs"
    root = setup_logging(level=logging.DEBUG, log_dir=str(log_dir))

    get_logger("auction").warning("Huddle 7 closed without bids")
    for handler in root.handlers:
        handler.flush()

    assert len(root.handlers) == 2
    content = (log_dir / LOG_FILE).read_text(encoding="utf-8")
    assert "WARNING huddle.auction: Huddle 7 closed without bids" in content
