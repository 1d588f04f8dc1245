from __future__ import annotations

import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor

from server.app.csv_storage import CsvDirectoryStorage
from server.app.ingest import RequestHandler, StoreLocks
from server.app.models import HEADER_LABELS
from server.app.storage import InMemoryStorage
from tools.send_sample import SAMPLE_SNAPSHOT

STORE_NAME = "Fresh Store"
WORKERS = 8


class SlowFirstUseStorage(InMemoryStorage):
  """Widens the gap between checking for an empty store and writing the header."""

  def __init__(self) -> None:
    super().__init__()
    self.resolve_calls = 0
    self._calls_lock = threading.Lock()

  def resolve_store(self, name):
    with self._calls_lock:
      self.resolve_calls += 1
    time.sleep(0.01)
    return super().resolve_store(name)

  def is_empty(self, handle):
    empty = super().is_empty(handle)
    time.sleep(0.02)
    return empty


def _post_concurrently(handler: RequestHandler, count: int):
  barrier = threading.Barrier(count)
  bodies = [json.dumps(dict(SAMPLE_SNAPSHOT, total_cycles=index)) for index in range(count)]

  def send(body: str):
    barrier.wait(timeout=5)
    return handler.handle(body)

  with ThreadPoolExecutor(max_workers=count) as pool:
    return list(pool.map(send, bodies))


def test_concurrent_first_use_creates_one_store_and_header():
  storage = SlowFirstUseStorage()
  handler = RequestHandler(storage, STORE_NAME, StoreLocks())

  envelopes = _post_concurrently(handler, WORKERS)

  assert all(envelope.status == "success" for envelope in envelopes)
  assert storage.store_names == [STORE_NAME]
  rows = storage.rows(storage.resolve_store(STORE_NAME))
  assert len(rows) == WORKERS + 1
  assert rows[0] == list(HEADER_LABELS)
  assert sum(1 for row in rows if row == list(HEADER_LABELS)) == 1
  assert sorted(row[1] for row in rows[1:]) == list(range(WORKERS))


def test_concurrent_first_use_on_csv_store(tmp_path):
  storage = CsvDirectoryStorage(tmp_path)
  handler = RequestHandler(storage, STORE_NAME, StoreLocks())

  envelopes = _post_concurrently(handler, WORKERS)

  assert all(envelope.status == "success" for envelope in envelopes)
  assert [path.name for path in tmp_path.iterdir()] == [f"{STORE_NAME}.csv"]
  rows = storage.read_rows(storage.resolve_store(STORE_NAME))
  assert len(rows) == WORKERS + 1
  assert rows[0] == list(HEADER_LABELS)
  assert all(len(row) == len(HEADER_LABELS) for row in rows)
  assert sum(1 for row in rows if row == list(HEADER_LABELS)) == 1
