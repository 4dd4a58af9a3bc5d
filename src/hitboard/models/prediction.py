"""Roster rows and the computed leaderboard records built from them."""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class RosterEntry(BaseModel):
    """One student guess as read from the predictions file."""

    seq: int = Field(..., ge=1)
    student: str
    player: str
    predicted_hits: Optional[int] = Field(default=None, ge=0)
    raw_predicted_hits: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def predicted_hits_value(self) -> int:
        return self.predicted_hits if self.predicted_hits is not None else 0


class FiniteDeviation(BaseModel):
    kind: Literal["finite"] = "finite"
    percent: float = Field(..., ge=0.0)

    model_config = ConfigDict(frozen=True)


class UnboundedDeviation(BaseModel):
    """Relative error with zero actual hits against a positive expectation."""

    kind: Literal["unbounded"] = "unbounded"

    model_config = ConfigDict(frozen=True)


Deviation = Annotated[Union[FiniteDeviation, UnboundedDeviation], Field(discriminator="kind")]

RecordStatus = Literal["ok", "not_found", "upstream_error", "malformed_data"]


class PredictionRecord(BaseModel):
    """Point-in-time accuracy of one guess."""

    id: int = Field(..., ge=1)
    student: str
    player: str
    predicted_hits: int = Field(..., ge=0)
    predicted_hits_to_date: float = Field(..., ge=0.0)
    actual_hits: int = Field(default=0, ge=0)
    deviation: Optional[Deviation] = None
    player_id: Optional[int] = None
    status: RecordStatus = "ok"

    model_config = ConfigDict(frozen=True)

    @property
    def is_unbounded(self) -> bool:
        return isinstance(self.deviation, UnboundedDeviation)

    @property
    def first_name(self) -> str:
        parts = self.student.split()
        return parts[0] if parts else self.student
