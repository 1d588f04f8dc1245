from __future__ import annotations

from functools import lru_cache

from .csv_storage import CsvDirectoryStorage
from .ingest import RequestHandler, StoreLocks
from .settings import get_settings
from .storage import InMemoryStorage, StoragePort


@lru_cache(maxsize=1)
def get_storage() -> StoragePort:
  settings = get_settings()
  if settings.storage_backend == "memory":
    return InMemoryStorage()
  return CsvDirectoryStorage(settings.data_dir)


@lru_cache(maxsize=1)
def get_store_locks() -> StoreLocks:
  return StoreLocks()


@lru_cache(maxsize=1)
def get_request_handler() -> RequestHandler:
  settings = get_settings()
  return RequestHandler(get_storage(), settings.store_name, get_store_locks())
