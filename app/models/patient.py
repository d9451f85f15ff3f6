# app/models/patient.py
import uuid
from datetime import date, datetime

from sqlmodel import SQLModel, Field


class Patient(SQLModel):
    """
    Care subject, row of `patients`.

    Owned by the platform; this service only reads it.
    """

    id: uuid.UUID
    display_name: str = Field(description="Name shown on dashboard cards")
    birth_date: date | None = None
    notes: str | None = None
    created_by: uuid.UUID | None = None
    created_at: datetime | None = None
