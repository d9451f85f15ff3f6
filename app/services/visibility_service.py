# app/services/visibility_service.py
import logging
import uuid
from datetime import date, datetime, timezone
from typing import assert_never

from supabase import AsyncClient

from app.core.errors import NotAuthorized, NotFound
from app.models.patient import Patient
from app.models.profile import Profile, Role
from app.repositories.access_repo import AccessRepository
from app.repositories.patient_repo import PatientRepository

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class VisibilityService:
    """
    Decides which patients a caller may see.

    Rules:
      - customer  -> patients linked through customer_patient_access
      - caregiver -> patients with an assignment that has not ended
                     (end_date is null or end_date >= today)
      - admin     -> every patient, ordered by display_name
      - anything else -> nothing

    Every patient-scoped endpoint goes through `ensure_patient_visible`,
    so a patient id pasted into a URL is checked the same way as one
    reached from the dashboard list.

    Store failures propagate as TransientFetchFailure; they are never
    turned into an empty result.
    """

    def __init__(
        self,
        access_repo: AccessRepository,
        patient_repo: PatientRepository,
    ):
        self.access_repo = access_repo
        self.patient_repo = patient_repo

    async def resolve_visible_patient_ids(
        self,
        client: AsyncClient,
        profile: Profile,
        today: date | None = None,
    ) -> frozenset[uuid.UUID]:
        """
        Return the set of patient ids `profile` may see.

        Duplicate edges to the same patient collapse into one id.
        """
        role = profile.role_kind
        if role is None:
            logger.info("Profile %s has unknown role %r; no patients visible", profile.id, profile.role)
            return frozenset()

        match role:
            case Role.CUSTOMER:
                edges = await self.access_repo.list_customer_access(client, profile.id)
                return frozenset(e.patient_id for e in edges)
            case Role.CAREGIVER:
                today = today or utc_today()
                assignments = await self.access_repo.list_active_assignments(
                    client, profile.id, today
                )
                return frozenset(a.patient_id for a in assignments if a.is_active(today))
            case Role.ADMIN:
                patients = await self.patient_repo.list_all(client)
                return frozenset(p.id for p in patients)
            case _:
                assert_never(role)

    async def list_visible_patients(
        self,
        client: AsyncClient,
        profile: Profile,
        today: date | None = None,
    ) -> list[Patient]:
        """
        Patients for the dashboard.

        Two phases for scoped roles: the id set is resolved first and only
        then are the patient rows fetched, restricted to that set.
        """
        if profile.role_kind is Role.ADMIN:
            return await self.patient_repo.list_all(client)

        patient_ids = await self.resolve_visible_patient_ids(client, profile, today)
        if not patient_ids:
            return []
        return await self.patient_repo.list_by_ids(client, sorted(patient_ids, key=str))

    async def ensure_patient_visible(
        self,
        client: AsyncClient,
        profile: Profile,
        patient_id: uuid.UUID,
        today: date | None = None,
    ) -> Patient:
        """
        Membership check for a single patient, then load it.

        Raises:
            NotAuthorized(404): patient outside the caller's set; looks the
                same as NotFound on the wire.
            NotFound(404): patient id is in scope but the row is gone.
        """
        if profile.role_kind is not Role.ADMIN:
            patient_ids = await self.resolve_visible_patient_ids(client, profile, today)
            if patient_id not in patient_ids:
                logger.info("Profile %s denied patient %s", profile.id, patient_id)
                raise NotAuthorized()

        patient = await self.patient_repo.get_by_id(client, patient_id)
        if patient is None:
            raise NotFound()
        return patient
