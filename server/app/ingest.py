"""Snapshot ingestion: store resolution, header setup, row append and the envelope."""
from __future__ import annotations

import logging
import threading
from typing import Dict, Union

from pydantic import ValidationError

from .models import HEADER_LABELS, EnvelopeModel, SnapshotRecord
from .results import ErrorKind, Failure, Result, Success
from .storage import StorageError, StoragePort, StoreHandle, StorageUnavailable, WriteFailure

logger = logging.getLogger(__name__)


def _storage_failure(exc: StorageError) -> Failure:
  if isinstance(exc, WriteFailure):
    return Failure(ErrorKind.WRITE_FAILURE, str(exc))
  if isinstance(exc, StorageUnavailable):
    return Failure(ErrorKind.STORAGE_UNAVAILABLE, str(exc))
  return Failure(ErrorKind.UNKNOWN, str(exc))


def describe_validation_error(exc: ValidationError) -> str:
  parts = []
  for error in exc.errors():
    location = ".".join(str(item) for item in error["loc"])
    parts.append(f"{location}: {error['msg']}" if location else error["msg"])
  return "; ".join(parts)


def parse_record(body: Union[bytes, str]) -> Result[SnapshotRecord]:
  try:
    return Success(SnapshotRecord.model_validate_json(body))
  except ValidationError as exc:
    return Failure(ErrorKind.MALFORMED_INPUT, describe_validation_error(exc))


class StoreLocks:
  """One lock per store name, shared by every request in the process."""

  def __init__(self) -> None:
    self._guard = threading.Lock()
    self._locks: Dict[str, threading.Lock] = {}

  def lock_for(self, name: str) -> threading.Lock:
    with self._guard:
      return self._locks.setdefault(name, threading.Lock())


class StoreResolver:
  def __init__(self, storage: StoragePort) -> None:
    self._storage = storage

  def resolve(self, name: str) -> Result[StoreHandle]:
    try:
      return Success(self._storage.resolve_store(name))
    except StorageError as exc:
      return _storage_failure(exc)


class SchemaInitializer:
  def __init__(self, storage: StoragePort) -> None:
    self._storage = storage

  def ensure_header(self, handle: StoreHandle) -> Result[bool]:
    """Write the header row into an empty store. The value says whether it wrote."""
    try:
      if not self._storage.is_empty(handle):
        return Success(False)
      written = self._storage.write_header(handle, HEADER_LABELS)
    except StorageError as exc:
      return _storage_failure(exc)
    if written:
      logger.info("Wrote header row to store %r", handle.name)
    return Success(written)


class RowAppender:
  def __init__(self, storage: StoragePort) -> None:
    self._storage = storage

  def append(self, handle: StoreHandle, record: SnapshotRecord) -> Result[None]:
    try:
      self._storage.append_row(handle, record.as_row())
    except StorageError as exc:
      return _storage_failure(exc)
    return Success(None)


class RequestHandler:
  """Turns one request body into one appended row and an envelope. Never raises."""

  def __init__(self, storage: StoragePort, store_name: str, locks: StoreLocks) -> None:
    self.store_name = store_name
    self._locks = locks
    self._resolver = StoreResolver(storage)
    self._initializer = SchemaInitializer(storage)
    self._appender = RowAppender(storage)

  def handle(self, body: Union[bytes, str]) -> EnvelopeModel:
    try:
      result = self._process(body)
    except Exception as exc:
      logger.exception("Unexpected failure while logging snapshot to %r", self.store_name)
      result = Failure(ErrorKind.UNKNOWN, str(exc) or type(exc).__name__)

    if isinstance(result, Failure):
      if result.kind is ErrorKind.MALFORMED_INPUT:
        logger.warning("Rejected snapshot: %s", result.message)
      elif result.kind is not ErrorKind.UNKNOWN:
        logger.error("Snapshot not logged (%s): %s", result.kind.value, result.message)
      return EnvelopeModel.error(result.message)
    return EnvelopeModel.success()

  def _process(self, body: Union[bytes, str]) -> Result[None]:
    parsed = parse_record(body)
    if isinstance(parsed, Failure):
      return parsed

    with self._locks.lock_for(self.store_name):
      resolved = self._resolver.resolve(self.store_name)
      if isinstance(resolved, Failure):
        return resolved
      initialized = self._initializer.ensure_header(resolved.value)
      if isinstance(initialized, Failure):
        return initialized

    appended = self._appender.append(resolved.value, parsed.value)
    if isinstance(appended, Failure):
      return appended
    logger.info("Logged snapshot %s to store %r", parsed.value.timestamp, self.store_name)
    return appended
