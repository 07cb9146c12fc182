from __future__ import annotations
import datetime
import uuid
from typing import Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid.uuid4().hex


def parse_timestamp(ts: str) -> datetime.datetime:
    """Return ``ts`` as timezone-aware datetime, naive values taken as UTC."""
    text = ts.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    dt = datetime.datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt


def format_weight(weight: float) -> str:
    """Render ``weight`` without a trailing ``.0`` for whole numbers."""
    text = str(float(weight))
    if text.endswith(".0"):
        return text[:-2]
    return text


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class SetData(_Record):
    id: str = Field(default_factory=new_id)
    weight: float = Field(ge=0)
    reps: int = Field(ge=0)
    rir: Optional[float] = None
    rpe: Optional[float] = None


class Exercise(_Record):
    id: str = Field(default_factory=new_id)
    name: str
    sets: List[SetData] = Field(default_factory=list)
    notes: Optional[str] = None


class Workout(_Record):
    """A finished session. ``date`` is an ISO-8601 date-time string."""

    id: str = Field(default_factory=new_id)
    name: str = ""
    date: str
    exercises: List[Exercise] = Field(default_factory=list)
    duration: int = Field(default=0, ge=0)

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        try:
            parse_timestamp(value)
        except ValueError:
            raise ValueError(f"invalid ISO-8601 date: {value!r}")
        return value

    @property
    def timestamp(self) -> datetime.datetime:
        return parse_timestamp(self.date)

    def exercise_names(self) -> List[str]:
        return [ex.name for ex in self.exercises]


class RoutineExercise(_Record):
    name: str


class Routine(_Record):
    """Template of exercise names; never read by the history math."""

    id: str = Field(default_factory=new_id)
    name: str
    exercises: List[RoutineExercise] = Field(default_factory=list)

    def exercise_names(self) -> List[str]:
        return [ex.name for ex in self.exercises]


class BodyMetric(_Record):
    id: str = Field(default_factory=new_id)
    date: str
    weight: float = Field(ge=0)
    body_fat: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("body_fat", "bodyFat")
    )
    measurements: Optional[Dict[str, float]] = None


class CardioSession(_Record):
    id: str = Field(default_factory=new_id)
    date: str
    type: str
    duration: float = Field(ge=0)
    distance: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class RecentPR(_Record):
    exercise_name: str
    weight: float
    reps: int
    date: str
    workout_id: str
    previous_best: str
    type: Literal["weight", "reps"]


class BestSet(_Record):
    weight: float
    reps: int

    def describe(self) -> str:
        return f"{format_weight(self.weight)}kg x {self.reps}"


class SeriesPoint(_Record):
    date: str
    workout_id: str
    weight: float
    reps: int
    volume_load: float


class ExerciseGroup(_Record):
    name: str
    exercises: List[str] = Field(default_factory=list)
