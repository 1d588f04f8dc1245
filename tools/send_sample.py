"""Posts the canonical sample snapshot to a running ingestion service."""
from __future__ import annotations

import argparse
import json
from typing import Dict, Union

import httpx

DEFAULT_URL = "http://127.0.0.1:8000"
SNAPSHOT_PATH = "/v1/snapshots"

SAMPLE_SNAPSHOT: Dict[str, Union[str, int, float]] = {
  "timestamp": "2024-01-01 12:00:00",
  "total_cycles": 100,
  "current_hour_cycles": 5,
  "hour": 12,
  "day": 1,
  "month": 1,
  "year": 2024,
  "avg_1min": 2.5,
  "avg_5min": 2.0,
  "avg_15min": 1.8,
  "avg_30min": 1.5,
}


def post_sample(client: httpx.Client, path: str = SNAPSHOT_PATH) -> Dict[str, str]:
  response = client.post(path, json=SAMPLE_SNAPSHOT)
  response.raise_for_status()
  return response.json()


def main() -> None:
  parser = argparse.ArgumentParser(description=__doc__)
  parser.add_argument("--url", default=DEFAULT_URL, help="Base URL of the ingestion service")
  args = parser.parse_args()
  with httpx.Client(base_url=args.url, timeout=10.0) as client:
    envelope = post_sample(client)
  print(json.dumps(envelope))


if __name__ == "__main__":
  main()
