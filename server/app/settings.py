from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from .logging_config import parse_level

DEFAULT_STORE_NAME = "Router Production Data"
STORAGE_BACKENDS = ("csv", "memory")


@dataclass
class Settings:
  data_dir: Path
  store_name: str = DEFAULT_STORE_NAME
  storage_backend: str = "csv"
  log_level: str = "INFO"

  @classmethod
  def from_env(cls) -> "Settings":
    data_dir = os.getenv("RPL_DATA_DIR")
    store_name = os.getenv("RPL_STORE_NAME")
    backend = os.getenv("RPL_STORAGE_BACKEND", "csv").strip().lower()
    if backend not in STORAGE_BACKENDS:
      raise ValueError(f"Unknown storage backend {backend!r}, expected one of {', '.join(STORAGE_BACKENDS)}")
    data_path = Path(data_dir).expanduser() if data_dir else Path.cwd() / "data"
    return cls(
      data_dir=data_path,
      store_name=store_name.strip() if store_name and store_name.strip() else DEFAULT_STORE_NAME,
      storage_backend=backend,
      log_level=parse_level(os.getenv("RPL_LOG_LEVEL", "INFO")),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  return Settings.from_env()
