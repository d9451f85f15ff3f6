# app/repositories/care_repo.py
import uuid
from datetime import datetime

from supabase import AsyncClient

from app.models.care import CareLog, Document, Task, Vital
from app.repositories.base import fetch_rows


class CareRepository:
    """
    Patient-scoped reads for the detail view: vitals, care logs, tasks and
    documents.

    NOTE:
      - Callers must have passed VisibilityService.ensure_patient_visible
        for `patient_id`; nothing here checks access.
    """

    async def list_vitals_since(
        self,
        client: AsyncClient,
        patient_id: uuid.UUID,
        since: datetime,
    ) -> list[Vital]:
        query = (
            client.table("vitals")
            .select("*")
            .eq("patient_id", str(patient_id))
            .gte("measured_at", since.isoformat())
            .order("measured_at")
        )
        rows = await fetch_rows(query, "vitals")
        return [Vital.model_validate(r) for r in rows]

    async def list_care_logs_since(
        self,
        client: AsyncClient,
        patient_id: uuid.UUID,
        since: datetime,
    ) -> list[CareLog]:
        query = (
            client.table("care_logs")
            .select("*")
            .eq("patient_id", str(patient_id))
            .gte("occurred_at", since.isoformat())
            .order("occurred_at", desc=True)
        )
        rows = await fetch_rows(query, "care_logs")
        return [CareLog.model_validate(r) for r in rows]

    async def list_tasks(self, client: AsyncClient, patient_id: uuid.UUID) -> list[Task]:
        query = (
            client.table("tasks")
            .select("*")
            .eq("patient_id", str(patient_id))
            .order("created_at", desc=True)
        )
        rows = await fetch_rows(query, "tasks")
        return [Task.model_validate(r) for r in rows]

    async def list_documents(
        self,
        client: AsyncClient,
        patient_id: uuid.UUID,
    ) -> list[Document]:
        query = (
            client.table("documents")
            .select("*")
            .eq("patient_id", str(patient_id))
            .order("created_at", desc=True)
        )
        rows = await fetch_rows(query, "documents")
        return [Document.model_validate(r) for r in rows]

    async def get_document(
        self,
        client: AsyncClient,
        patient_id: uuid.UUID,
        document_id: int,
    ) -> Document | None:
        query = (
            client.table("documents")
            .select("*")
            .eq("id", document_id)
            .eq("patient_id", str(patient_id))
            .limit(1)
        )
        rows = await fetch_rows(query, "documents")
        if not rows:
            return None
        return Document.model_validate(rows[0])
