"""Logging setup for the ingestion service."""
from __future__ import annotations

import logging
import sys

LOGGER_NAME = "server"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def parse_level(level: str) -> str:
  name = level.strip().upper()
  if name not in LOG_LEVELS:
    raise ValueError(f"Unknown log level {level!r}, expected one of {', '.join(LOG_LEVELS)}")
  return name


def configure_logging(level: str = "INFO") -> logging.Logger:
  """Attach a stdout handler to the service logger once and set its level."""
  logger = logging.getLogger(LOGGER_NAME)
  logger.setLevel(parse_level(level))
  if not any(getattr(handler, "_rpl_handler", False) for handler in logger.handlers):
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._rpl_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
  return logger
