from __future__ import annotations

from typing import List, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

HEADER_LABELS: Tuple[str, ...] = (
  "Timestamp",
  "Total Cycles",
  "Current Hour Cycles",
  "Hour",
  "Day",
  "Month",
  "Year",
  "Avg 1min",
  "Avg 5min",
  "Avg 15min",
  "Avg 30min",
)

SUCCESS_MESSAGE = "Data logged successfully"

Cell = Union[str, int, float]


class SnapshotRecord(BaseModel):
  """One production metrics snapshot as sent by the router controller."""

  timestamp: str
  total_cycles: int = Field(ge=0)
  current_hour_cycles: int = Field(ge=0)
  hour: int
  day: int
  month: int
  year: int
  avg_1min: float
  avg_5min: float
  avg_15min: float
  avg_30min: float

  model_config = ConfigDict(strict=True, frozen=True)

  @field_validator("timestamp")
  @classmethod
  def validate_timestamp(cls, value: str) -> str:  # noqa: D401
    """Reject blank device timestamps."""
    if not value.strip():
      raise ValueError("timestamp must not be empty")
    return value

  def as_row(self) -> List[Cell]:
    return [getattr(self, name) for name in type(self).model_fields]


class EnvelopeModel(BaseModel):
  status: Literal["success", "error"]
  message: str

  @classmethod
  def success(cls) -> "EnvelopeModel":
    return cls(status="success", message=SUCCESS_MESSAGE)

  @classmethod
  def error(cls, message: str) -> "EnvelopeModel":
    return cls(status="error", message=message)
