from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
  MALFORMED_INPUT = "malformed_input"
  STORAGE_UNAVAILABLE = "storage_unavailable"
  WRITE_FAILURE = "write_failure"
  UNKNOWN = "unknown"


@dataclass(frozen=True)
class Success(Generic[T]):
  value: T


@dataclass(frozen=True)
class Failure:
  kind: ErrorKind
  message: str


Result = Union[Success[T], Failure]
