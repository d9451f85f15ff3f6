# app/models/access.py
import uuid
from datetime import date

from sqlmodel import SQLModel


class CustomerPatientAccess(SQLModel):
    """
    Edge granting a customer (family member) visibility into a patient.
    No temporal bound.
    """

    customer_id: uuid.UUID
    patient_id: uuid.UUID


class CaregiverAssignment(SQLModel):
    """
    Edge assigning a caregiver to a patient for a period.

    Active iff end_date is null or end_date >= today.
    """

    caregiver_id: uuid.UUID
    patient_id: uuid.UUID
    start_date: date | None = None
    end_date: date | None = None

    def is_active(self, today: date) -> bool:
        return self.end_date is None or self.end_date >= today
