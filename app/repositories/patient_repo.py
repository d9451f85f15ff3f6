# app/repositories/patient_repo.py
import uuid

from supabase import AsyncClient

from app.models.patient import Patient
from app.repositories.base import fetch_rows

TABLE = "patients"


class PatientRepository:
    """
    Data access layer for `patients`.
    """

    async def get_by_id(self, client: AsyncClient, patient_id: uuid.UUID) -> Patient | None:
        query = client.table(TABLE).select("*").eq("id", str(patient_id)).limit(1)
        rows = await fetch_rows(query, TABLE)
        if not rows:
            return None
        return Patient.model_validate(rows[0])

    async def list_by_ids(
        self,
        client: AsyncClient,
        patient_ids: list[uuid.UUID],
    ) -> list[Patient]:
        """
        Fetch the given patients. An empty id list short-circuits to [].
        """
        if not patient_ids:
            return []
        query = client.table(TABLE).select("*").in_("id", [str(p) for p in patient_ids])
        rows = await fetch_rows(query, TABLE)
        return [Patient.model_validate(r) for r in rows]

    async def list_all(self, client: AsyncClient) -> list[Patient]:
        """All patients ordered by display_name ascending."""
        query = client.table(TABLE).select("*").order("display_name")
        rows = await fetch_rows(query, TABLE)
        return [Patient.model_validate(r) for r in rows]
