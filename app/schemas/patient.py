# app/schemas/patient.py
import uuid
from datetime import date, datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel

from app.models.care import DaySlot, TaskStatus, VitalType

# Chart windows offered by the detail view, in days
VITALS_WINDOWS = (30, 90)


class PatientRead(SQLModel):
    """Patient card / header."""

    id: uuid.UUID
    display_name: str
    birth_date: date | None = None
    notes: str | None = None


class ProfileRead(SQLModel):
    id: uuid.UUID
    role: str | None
    full_name: str | None = None
    phone: str | None = None


class DashboardRead(SQLModel):
    """
    Payload for the dashboard.

    `heading` is already translated for the current language.
    """

    model_config = ConfigDict(extra="forbid")

    profile: ProfileRead
    heading: str
    patients: list[PatientRead]


class VitalPoint(SQLModel):
    """
    One chart point. Missing numbers are reported as 0.
    """

    date: str  # MM/DD label
    measured_at: datetime
    value: float = 0
    systolic: float = 0
    diastolic: float = 0


class VitalSeries(SQLModel):
    type: VitalType
    points: list[VitalPoint]


class VitalsRead(SQLModel):
    days: int
    series: list[VitalSeries]


class CareLogRead(SQLModel):
    id: int
    slot: DaySlot
    title: str
    details: str | None = None
    mood: str | None = None
    completed: bool
    occurred_at: datetime


class TaskRead(SQLModel):
    id: int
    title: str
    due_at: datetime | None = None
    status: TaskStatus
    status_label: str
    created_at: datetime


class DocumentRead(SQLModel):
    id: int
    label: str
    path: str
    created_at: datetime


class DocumentUrlRead(SQLModel):
    url: str
    expires_in: int


class PatientDetailRead(SQLModel):
    """Everything the patient detail view shows, in one payload."""

    model_config = ConfigDict(extra="forbid")

    patient: PatientRead
    vitals: VitalsRead
    care_logs: list[CareLogRead]
    tasks: list[TaskRead]
    documents: list[DocumentRead]
