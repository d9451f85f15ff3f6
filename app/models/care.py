# app/models/care.py
import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import field_validator
from sqlmodel import SQLModel, Field

VitalType = Literal[
    "blood_pressure",
    "heart_rate",
    "blood_glucose",
    "temperature",
    "oxygen_saturation",
]
DaySlot = Literal["morning", "noon", "afternoon", "evening"]
TaskStatus = Literal["open", "in_progress", "done"]


class Vital(SQLModel):
    """
    One measurement.

    blood_pressure uses systolic/diastolic, every other type uses value.
    """

    id: int
    patient_id: uuid.UUID
    type: VitalType
    systolic: float | None = None
    diastolic: float | None = None
    value: float | None = None
    measured_at: datetime
    recorded_by: uuid.UUID | None = None

    @field_validator("measured_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # `timestamp` columns come back without an offset
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class CareLog(SQLModel):
    id: int
    patient_id: uuid.UUID
    slot: DaySlot
    title: str | None = None
    details: str | None = None
    mood: str | None = None
    completed: bool = False
    occurred_at: datetime
    recorded_by: uuid.UUID | None = None


class Task(SQLModel):
    id: int
    patient_id: uuid.UUID
    assigned_to: uuid.UUID | None = None
    title: str
    due_at: datetime | None = None
    status: TaskStatus = "open"
    created_by: uuid.UUID | None = None
    created_at: datetime


class Document(SQLModel):
    """
    Metadata row for a file kept in the private documents bucket.
    """

    id: int
    patient_id: uuid.UUID | None = None
    owner_id: uuid.UUID | None = None
    path: str = Field(description="Object path inside the documents bucket")
    label: str | None = None
    created_at: datetime

    @property
    def display_label(self) -> str:
        """Label if set, else the file name part of the path."""
        return self.label or self.path.rsplit("/", 1)[-1]
