"""Storage port for named append-only row stores, plus an in-memory adapter."""
from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, List, Protocol, Sequence

from .models import Cell


class StorageError(RuntimeError):
  pass


class StorageUnavailable(StorageError):
  """The platform could not be reached, or refused access to a store."""


class WriteFailure(StorageError):
  """A header or data row could not be written to a resolved store."""


@dataclass(frozen=True)
class StoreHandle:
  name: str
  locator: str


class StoragePort(Protocol):
  backend_name: str

  def resolve_store(self, name: str) -> StoreHandle:
    """Return the store called ``name``, creating it when absent."""
    ...

  def row_count(self, handle: StoreHandle) -> int:
    ...

  def is_empty(self, handle: StoreHandle) -> bool:
    """Whether the store has no rows; must not scale with the store's size."""
    ...

  def write_header(self, handle: StoreHandle, labels: Sequence[str]) -> bool:
    """Write ``labels`` as row 0 if the store is empty; report whether it wrote."""
    ...

  def append_row(self, handle: StoreHandle, fields: Sequence[Cell]) -> None:
    """Append one complete row atomically."""
    ...


class InMemoryStorage:
  """Process-local stores kept in lists; rows are never removed."""

  backend_name = "memory"

  def __init__(self) -> None:
    self._registry_lock = threading.Lock()
    self._rows: Dict[str, List[List[Cell]]] = {}
    self._locks: Dict[str, threading.Lock] = {}

  def resolve_store(self, name: str) -> StoreHandle:
    with self._registry_lock:
      if name not in self._rows:
        self._rows[name] = []
        self._locks[name] = threading.Lock()
    return StoreHandle(name=name, locator=f"memory://{name}")

  def row_count(self, handle: StoreHandle) -> int:
    return len(self._store(handle))

  def is_empty(self, handle: StoreHandle) -> bool:
    return not self._store(handle)

  def write_header(self, handle: StoreHandle, labels: Sequence[str]) -> bool:
    rows = self._store(handle)
    with self._locks[handle.name]:
      if rows:
        return False
      rows.append(list(labels))
      return True

  def append_row(self, handle: StoreHandle, fields: Sequence[Cell]) -> None:
    rows = self._store(handle)
    with self._locks[handle.name]:
      rows.append(list(fields))

  def rows(self, handle: StoreHandle) -> List[List[Cell]]:
    rows = self._store(handle)
    with self._locks[handle.name]:
      return [list(row) for row in rows]

  @property
  def store_names(self) -> List[str]:
    with self._registry_lock:
      return sorted(self._rows)

  def _store(self, handle: StoreHandle) -> List[List[Cell]]:
    try:
      return self._rows[handle.name]
    except KeyError as exc:
      raise StorageUnavailable(f"Store {handle.name!r} does not exist") from exc
