"""Tests for logging setup."""

import logging

from suivm.utils.logger import setup_logging


def test_writes_log_file_in_store(tmp_path):
    setup_logging(tmp_path, verbose=False)
    log = logging.getLogger("suivm.core.store")
    log.info("pointer updated")
    for handler in logging.getLogger("suivm").handlers:
        handler.flush()
    assert "pointer updated" in (tmp_path / "suivm.log").read_text()


def test_repeated_setup_does_not_stack_handlers(tmp_path):
    setup_logging(tmp_path)
    setup_logging(tmp_path, verbose=True)
    handlers = logging.getLogger("suivm").handlers
    assert len(handlers) == 2
    console = [h for h in handlers if not isinstance(h, logging.FileHandler)]
    assert console[0].level == logging.DEBUG
