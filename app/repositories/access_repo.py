# app/repositories/access_repo.py
import uuid
from datetime import date

from supabase import AsyncClient

from app.models.access import CaregiverAssignment, CustomerPatientAccess
from app.repositories.base import fetch_rows

CUSTOMER_ACCESS = "customer_patient_access"
CAREGIVER_ASSIGNMENTS = "caregiver_assignments"


class AccessRepository:
    """
    Reads the edges that grant visibility into patients.

    Only the rows are returned here; deciding what they mean is
    VisibilityService's job.
    """

    async def list_customer_access(
        self,
        client: AsyncClient,
        customer_id: uuid.UUID,
    ) -> list[CustomerPatientAccess]:
        query = (
            client.table(CUSTOMER_ACCESS)
            .select("customer_id, patient_id")
            .eq("customer_id", str(customer_id))
        )
        rows = await fetch_rows(query, CUSTOMER_ACCESS)
        return [CustomerPatientAccess.model_validate(r) for r in rows]

    async def list_active_assignments(
        self,
        client: AsyncClient,
        caregiver_id: uuid.UUID,
        today: date,
    ) -> list[CaregiverAssignment]:
        """
        Assignments of a caregiver that have not ended before `today`.
        """
        query = (
            client.table(CAREGIVER_ASSIGNMENTS)
            .select("caregiver_id, patient_id, start_date, end_date")
            .eq("caregiver_id", str(caregiver_id))
            .or_(f"end_date.is.null,end_date.gte.{today.isoformat()}")
        )
        rows = await fetch_rows(query, CAREGIVER_ASSIGNMENTS)
        return [CaregiverAssignment.model_validate(r) for r in rows]
