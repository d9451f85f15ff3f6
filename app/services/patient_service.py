# app/services/patient_service.py
import asyncio
import uuid
from datetime import datetime, timedelta, timezone

from supabase import AsyncClient

from app.core.config import get_settings
from app.core.errors import NotFound, ValidationFailure
from app.core.storage_utils import create_signed_document_url
from app.i18n.translator import LanguageContext
from app.models.care import CareLog, Document, Task, Vital
from app.models.patient import Patient
from app.models.profile import Profile, Role
from app.repositories.care_repo import CareRepository
from app.schemas.patient import (
    CareLogRead,
    DashboardRead,
    DocumentRead,
    DocumentUrlRead,
    PatientDetailRead,
    PatientRead,
    ProfileRead,
    TaskRead,
    VitalPoint,
    VitalSeries,
    VITALS_WINDOWS,
    VitalsRead,
)
from app.services.visibility_service import VisibilityService

settings = get_settings()

# Vitals are always fetched for the widest window; charts narrow it down.
VITALS_FETCH_DAYS = 90
CARE_LOG_DAYS = 7

# Chart order on the detail page
VITAL_CHART_ORDER = (
    "blood_pressure",
    "heart_rate",
    "temperature",
    "oxygen_saturation",
    "blood_glucose",
)

DASHBOARD_HEADINGS: dict[Role, str] = {
    Role.CUSTOMER: "nav.myFamily",
    Role.CAREGIVER: "nav.myPatients",
    Role.ADMIN: "nav.patients",
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PatientService:
    """
    Business logic for the dashboard and the patient detail view.

    Responsibilities:
      - run the visibility check before touching any patient-scoped table
      - shape rows into view payloads (chart series, labels)
      - map missing rows to NotFound
    """

    def __init__(self, visibility: VisibilityService, care_repo: CareRepository):
        self.visibility = visibility
        self.care_repo = care_repo

    # ----- Dashboard -----

    async def get_dashboard(
        self,
        client: AsyncClient,
        profile: Profile,
        i18n: LanguageContext,
    ) -> DashboardRead:
        patients = await self.visibility.list_visible_patients(client, profile)
        heading_key = DASHBOARD_HEADINGS.get(profile.role_kind, "dashboard.welcome")
        return DashboardRead(
            profile=ProfileRead(
                id=profile.id,
                role=profile.role,
                full_name=profile.full_name,
                phone=profile.phone,
            ),
            heading=i18n.t(heading_key),
            patients=[_patient_read(p) for p in patients],
        )

    # ----- Patient detail -----

    async def get_patient_detail(
        self,
        client: AsyncClient,
        profile: Profile,
        patient_id: uuid.UUID,
        i18n: LanguageContext,
        days: int = 30,
    ) -> PatientDetailRead:
        """
        Load everything for the detail view.

        The membership check completes before any sub-resource is requested;
        the sub-resources themselves are independent and load together.
        """
        _check_window(days)
        patient = await self.visibility.ensure_patient_visible(client, profile, patient_id)

        now = _now()
        vitals, care_logs, tasks, documents = await asyncio.gather(
            self.care_repo.list_vitals_since(
                client, patient_id, now - timedelta(days=VITALS_FETCH_DAYS)
            ),
            self.care_repo.list_care_logs_since(
                client, patient_id, now - timedelta(days=CARE_LOG_DAYS)
            ),
            self.care_repo.list_tasks(client, patient_id),
            self.care_repo.list_documents(client, patient_id),
        )

        return PatientDetailRead(
            patient=_patient_read(patient),
            vitals=build_vitals(vitals, days, now),
            care_logs=[_care_log_read(log, i18n) for log in care_logs],
            tasks=[_task_read(task, i18n) for task in tasks],
            documents=[_document_read(doc) for doc in documents],
        )

    async def get_vitals(
        self,
        client: AsyncClient,
        profile: Profile,
        patient_id: uuid.UUID,
        days: int = 30,
    ) -> VitalsRead:
        _check_window(days)
        await self.visibility.ensure_patient_visible(client, profile, patient_id)
        now = _now()
        vitals = await self.care_repo.list_vitals_since(
            client, patient_id, now - timedelta(days=VITALS_FETCH_DAYS)
        )
        return build_vitals(vitals, days, now)

    async def get_care_logs(
        self,
        client: AsyncClient,
        profile: Profile,
        patient_id: uuid.UUID,
        i18n: LanguageContext,
    ) -> list[CareLogRead]:
        await self.visibility.ensure_patient_visible(client, profile, patient_id)
        logs = await self.care_repo.list_care_logs_since(
            client, patient_id, _now() - timedelta(days=CARE_LOG_DAYS)
        )
        return [_care_log_read(log, i18n) for log in logs]

    async def get_tasks(
        self,
        client: AsyncClient,
        profile: Profile,
        patient_id: uuid.UUID,
        i18n: LanguageContext,
    ) -> list[TaskRead]:
        await self.visibility.ensure_patient_visible(client, profile, patient_id)
        tasks = await self.care_repo.list_tasks(client, patient_id)
        return [_task_read(task, i18n) for task in tasks]

    async def get_documents(
        self,
        client: AsyncClient,
        profile: Profile,
        patient_id: uuid.UUID,
    ) -> list[DocumentRead]:
        await self.visibility.ensure_patient_visible(client, profile, patient_id)
        documents = await self.care_repo.list_documents(client, patient_id)
        return [_document_read(doc) for doc in documents]

    async def get_document_url(
        self,
        client: AsyncClient,
        profile: Profile,
        patient_id: uuid.UUID,
        document_id: int,
    ) -> DocumentUrlRead:
        """
        Signed download URL for one of the patient's documents.

        Raises:
            NotFound(404): patient not visible or document not attached to it.
            TransientFetchFailure(503): Storage could not sign the URL.
        """
        await self.visibility.ensure_patient_visible(client, profile, patient_id)
        document = await self.care_repo.get_document(client, patient_id, document_id)
        if document is None:
            raise NotFound("Document not found")
        url = await create_signed_document_url(client, document.path)
        return DocumentUrlRead(url=url, expires_in=settings.SIGNED_URL_TTL_SECONDS)


def _check_window(days: int) -> None:
    if days not in VITALS_WINDOWS:
        raise ValidationFailure(
            f"days must be one of {', '.join(str(d) for d in VITALS_WINDOWS)}"
        )


def build_vitals(vitals: list[Vital], days: int, now: datetime) -> VitalsRead:
    """
    Group vitals into one chart series per type, limited to the last `days`.

    Types without points in the window are left out.
    """
    cutoff = now - timedelta(days=days)
    by_type: dict[str, list[VitalPoint]] = {}
    for v in vitals:
        if v.measured_at < cutoff:
            continue
        by_type.setdefault(v.type, []).append(
            VitalPoint(
                date=v.measured_at.strftime("%m/%d"),
                measured_at=v.measured_at,
                value=v.value or 0,
                systolic=v.systolic or 0,
                diastolic=v.diastolic or 0,
            )
        )

    series = [
        VitalSeries(type=vital_type, points=by_type[vital_type])
        for vital_type in VITAL_CHART_ORDER
        if by_type.get(vital_type)
    ]
    return VitalsRead(days=days, series=series)


def _patient_read(patient: Patient) -> PatientRead:
    return PatientRead(
        id=patient.id,
        display_name=patient.display_name,
        birth_date=patient.birth_date,
        notes=patient.notes,
    )


def _care_log_read(log: CareLog, i18n: LanguageContext) -> CareLogRead:
    return CareLogRead(
        id=log.id,
        slot=log.slot,
        title=log.title or i18n.t(f"careLog.{log.slot}"),
        details=log.details,
        mood=log.mood,
        completed=log.completed,
        occurred_at=log.occurred_at,
    )


def _task_read(task: Task, i18n: LanguageContext) -> TaskRead:
    return TaskRead(
        id=task.id,
        title=task.title,
        due_at=task.due_at,
        status=task.status,
        status_label=i18n.t(f"task.{task.status}"),
        created_at=task.created_at,
    )


def _document_read(doc: Document) -> DocumentRead:
    return DocumentRead(
        id=doc.id,
        label=doc.display_label,
        path=doc.path,
        created_at=doc.created_at,
    )
