from __future__ import annotations

import csv
import io
import logging
import os
import re
import threading
from pathlib import Path
from typing import BinaryIO, Dict, List, Sequence

from .models import Cell
from .storage import StorageUnavailable, StoreHandle, WriteFailure

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9 _.-]")


def store_filename(name: str) -> str:
  cleaned = _UNSAFE_CHARS.sub("_", name.strip()).strip(". ")
  if not cleaned:
    raise StorageUnavailable(f"Store name {name!r} cannot be mapped to a file")
  return f"{cleaned}.csv"


def _format_row(fields: Sequence[object]) -> str:
  buffer = io.StringIO()
  csv.writer(buffer).writerow(fields)
  return buffer.getvalue()


def append_line(stream: BinaryIO, data: bytes) -> None:
  """Append one encoded row, terminating any unfinished last line first.

  On failure the stream is truncated back to where it ended before the call.
  """
  start = stream.seek(0, os.SEEK_END)
  if start:
    stream.seek(start - 1)
    if stream.read(1) != b"\n":
      data = b"\n" + data
  try:
    stream.write(data)
    stream.flush()
  except OSError:
    stream.truncate(start)
    raise


class CsvDirectoryStorage:
  """Keeps each named store as one CSV file inside a data directory."""

  backend_name = "csv"

  def __init__(self, data_dir: Path) -> None:
    self._data_dir = data_dir
    self._registry_lock = threading.Lock()
    self._locks: Dict[Path, threading.Lock] = {}

  @property
  def data_dir(self) -> Path:
    return self._data_dir

  def resolve_store(self, name: str) -> StoreHandle:
    path = self._data_dir / store_filename(name)
    with self._lock_for(path):
      try:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        if not path.exists():
          path.touch()
          logger.info("Created store %r at %s", name, path)
      except OSError as exc:
        raise StorageUnavailable(f"Cannot open store {name!r} in {self._data_dir}: {exc}") from exc
    return StoreHandle(name=name, locator=str(path))

  def row_count(self, handle: StoreHandle) -> int:
    return len(self.read_rows(handle))

  def is_empty(self, handle: StoreHandle) -> bool:
    try:
      return Path(handle.locator).stat().st_size == 0
    except OSError as exc:
      raise StorageUnavailable(f"Cannot read store {handle.name!r}: {exc}") from exc

  def read_rows(self, handle: StoreHandle) -> List[List[str]]:
    path = Path(handle.locator)
    try:
      with path.open(newline="", encoding="utf-8") as stream:
        return list(csv.reader(stream))
    except OSError as exc:
      raise StorageUnavailable(f"Cannot read store {handle.name!r}: {exc}") from exc

  def write_header(self, handle: StoreHandle, labels: Sequence[str]) -> bool:
    with self._lock_for(Path(handle.locator)):
      if not self.is_empty(handle):
        return False
      self._write_line(handle, labels)
      return True

  def append_row(self, handle: StoreHandle, fields: Sequence[Cell]) -> None:
    with self._lock_for(Path(handle.locator)):
      self._write_line(handle, fields)

  def _write_line(self, handle: StoreHandle, fields: Sequence[object]) -> None:
    data = _format_row(fields).encode("utf-8")
    try:
      with Path(handle.locator).open("a+b") as stream:
        append_line(stream, data)
    except OSError as exc:
      raise WriteFailure(f"Cannot write to store {handle.name!r}: {exc}") from exc

  def _lock_for(self, path: Path) -> threading.Lock:
    with self._registry_lock:
      return self._locks.setdefault(path, threading.Lock())
