from __future__ import annotations

import logging

import pytest

from server.app.logging_config import LOGGER_NAME, configure_logging


def test_configure_logging_is_idempotent():
  logger = configure_logging("debug")
  configure_logging("warning")
  own_handlers = [handler for handler in logger.handlers if getattr(handler, "_rpl_handler", False)]
  assert logger is logging.getLogger(LOGGER_NAME)
  assert len(own_handlers) == 1
  assert logger.level == logging.WARNING


def test_configure_logging_rejects_non_level_names():
  with pytest.raises(ValueError):
    configure_logging("BASIC_FORMAT")
