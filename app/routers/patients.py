# app/routers/patients.py
import uuid

from fastapi import APIRouter, Depends, Query
from supabase import AsyncClient

from app.core.auth import get_current_profile, get_current_session
from app.core.guard import RequestSessionSource
from app.core.session_events import SessionEvents, get_session_events
from app.core.supabase_client import get_store_client
from app.i18n.translator import LanguageContext, get_language_context
from app.models.profile import Profile
from app.models.session import AuthSession
from app.repositories.access_repo import AccessRepository
from app.repositories.care_repo import CareRepository
from app.repositories.patient_repo import PatientRepository
from app.schemas.patient import (
    CareLogRead,
    DashboardRead,
    DocumentRead,
    DocumentUrlRead,
    PatientDetailRead,
    TaskRead,
    VitalsRead,
)
from app.services.guarded_fetch import GuardedFetch
from app.services.patient_service import PatientService
from app.services.visibility_service import VisibilityService

router = APIRouter(prefix="/patients", tags=["Patients"])

visibility = VisibilityService(AccessRepository(), PatientRepository())
service = PatientService(visibility, CareRepository())


def get_session_source(
    session: AuthSession = Depends(get_current_session),
    events: SessionEvents = Depends(get_session_events),
) -> RequestSessionSource:
    return RequestSessionSource(session, events)


# -------- Dashboard --------


@router.get("", response_model=DashboardRead)
async def read_dashboard(
    profile: Profile = Depends(get_current_profile),
    source: RequestSessionSource = Depends(get_session_source),
    client: AsyncClient = Depends(get_store_client),
    i18n: LanguageContext = Depends(get_language_context),
):
    """
    Patients visible to the caller.

      - customer: linked family members
      - caregiver: currently assigned patients
      - admin: everyone, by name
    """
    async with GuardedFetch(source) as view:
        return await view.run(service.get_dashboard(client, profile, i18n))


# -------- Patient detail --------


@router.get("/{patient_id}", response_model=PatientDetailRead)
async def read_patient(
    patient_id: uuid.UUID,
    days: int = Query(30, description="30 or 90"),
    profile: Profile = Depends(get_current_profile),
    source: RequestSessionSource = Depends(get_session_source),
    client: AsyncClient = Depends(get_store_client),
    i18n: LanguageContext = Depends(get_language_context),
):
    """
    Full detail view for one patient.

    A patient outside the caller's scope answers 404, exactly like one
    that does not exist.
    """
    async with GuardedFetch(source) as view:
        return await view.run(
            service.get_patient_detail(client, profile, patient_id, i18n, days)
        )


@router.get("/{patient_id}/vitals", response_model=VitalsRead)
async def read_vitals(
    patient_id: uuid.UUID,
    days: int = Query(30, description="30 or 90"),
    profile: Profile = Depends(get_current_profile),
    source: RequestSessionSource = Depends(get_session_source),
    client: AsyncClient = Depends(get_store_client),
):
    """Vital chart series for the last 30 or 90 days."""
    async with GuardedFetch(source) as view:
        return await view.run(service.get_vitals(client, profile, patient_id, days))


@router.get("/{patient_id}/care-logs", response_model=list[CareLogRead])
async def read_care_logs(
    patient_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    source: RequestSessionSource = Depends(get_session_source),
    client: AsyncClient = Depends(get_store_client),
    i18n: LanguageContext = Depends(get_language_context),
):
    """Care logs of the last 7 days, newest first."""
    async with GuardedFetch(source) as view:
        return await view.run(service.get_care_logs(client, profile, patient_id, i18n))


@router.get("/{patient_id}/tasks", response_model=list[TaskRead])
async def read_tasks(
    patient_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    source: RequestSessionSource = Depends(get_session_source),
    client: AsyncClient = Depends(get_store_client),
    i18n: LanguageContext = Depends(get_language_context),
):
    async with GuardedFetch(source) as view:
        return await view.run(service.get_tasks(client, profile, patient_id, i18n))


@router.get("/{patient_id}/documents", response_model=list[DocumentRead])
async def read_documents(
    patient_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    source: RequestSessionSource = Depends(get_session_source),
    client: AsyncClient = Depends(get_store_client),
):
    async with GuardedFetch(source) as view:
        return await view.run(service.get_documents(client, profile, patient_id))


@router.get(
    "/{patient_id}/documents/{document_id}/download",
    response_model=DocumentUrlRead,
)
async def download_document(
    patient_id: uuid.UUID,
    document_id: int,
    profile: Profile = Depends(get_current_profile),
    source: RequestSessionSource = Depends(get_session_source),
    client: AsyncClient = Depends(get_store_client),
):
    """
    Time-limited signed URL for one document.

    The URL expires after SIGNED_URL_TTL_SECONDS.
    """
    async with GuardedFetch(source) as view:
        return await view.run(
            service.get_document_url(client, profile, patient_id, document_id)
        )
