"""Shared fixtures: settings, an in-memory Supabase stand-in, tokens."""

import asyncio
import os
import tempfile
import uuid
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

os.environ.setdefault("SUPABASE_URL", "https://project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault(
    "LANGUAGE_STATE_FILE",
    os.path.join(tempfile.mkdtemp(prefix="careconnect-"), "language.json"),
)

import pytest
from jose import jwt
from postgrest.exceptions import APIError

from app.core.config import get_settings

settings = get_settings()

CUSTOMER_ID = uuid.UUID("00000000-0000-0000-0000-0000000000c1")
CAREGIVER_ID = uuid.UUID("00000000-0000-0000-0000-0000000000c2")
ADMIN_ID = uuid.UUID("00000000-0000-0000-0000-0000000000a1")
STRANGER_ID = uuid.UUID("00000000-0000-0000-0000-0000000000f1")

P1 = uuid.UUID("00000000-0000-0000-0000-000000000001")
P2 = uuid.UUID("00000000-0000-0000-0000-000000000002")
P3 = uuid.UUID("00000000-0000-0000-0000-000000000003")
P4 = uuid.UUID("00000000-0000-0000-0000-000000000004")


def iso(value: datetime) -> str:
    return value.isoformat()


class FakeQuery:
    """
    Just enough of the PostgREST builder for the repositories:
    select / eq / in_ / gte / or_ / order / limit / execute.
    """

    def __init__(self, store: "FakeSupabase", table: str):
        self.store = store
        self.table = table
        self.filters: list = []
        self.ordering: tuple[str, bool] | None = None
        self.max_rows: int | None = None

    def select(self, *columns):
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: str(row.get(column)) == str(value))
        return self

    def in_(self, column, values):
        wanted = {str(v) for v in values}
        self.filters.append(lambda row: str(row.get(column)) in wanted)
        return self

    def gte(self, column, value):
        self.filters.append(
            lambda row: row.get(column) is not None and str(row[column]) >= str(value)
        )
        return self

    def or_(self, expression):
        clauses = []
        for clause in expression.split(","):
            column, op, value = clause.split(".", 2)
            clauses.append((column, op, value))

        def matches(row):
            for column, op, value in clauses:
                current = row.get(column)
                if op == "is" and value == "null" and current is None:
                    return True
                if op == "gte" and current is not None and str(current) >= value:
                    return True
            return False

        self.filters.append(matches)
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    async def execute(self):
        self.store.queries.append(self.table)
        if self.store.delay:
            await asyncio.sleep(self.store.delay)
        if self.table in self.store.failing:
            raise APIError({"message": "upstream failure", "code": "500"})

        rows = [dict(r) for r in self.store.tables.get(self.table, [])]
        rows = [r for r in rows if all(f(r) for f in self.filters)]
        if self.ordering:
            column, desc = self.ordering
            rows.sort(key=lambda r: (r.get(column) is not None, str(r.get(column))), reverse=desc)
        if self.max_rows is not None:
            rows = rows[: self.max_rows]
        return SimpleNamespace(data=rows)


class FakeBucket:
    def __init__(self, store: "FakeSupabase", name: str):
        self.store = store
        self.name = name

    async def create_signed_url(self, path, expires_in):
        self.store.signed.append((self.name, path, expires_in))
        return {"signedURL": f"https://project.supabase.co/storage/v1/object/sign/{self.name}/{path}?token=t"}


class FakeStorage:
    def __init__(self, store: "FakeSupabase"):
        self.store = store

    def from_(self, bucket):
        return FakeBucket(self.store, bucket)


class FakeSupabase:
    """In-memory stand-in for supabase.AsyncClient used by the tests."""

    def __init__(self, tables: dict[str, list[dict]] | None = None):
        self.tables = tables or {}
        self.queries: list[str] = []
        self.failing: set[str] = set()
        self.delay: float = 0
        self.signed: list[tuple] = []
        self.storage = FakeStorage(self)
        self.auth = SimpleNamespace(admin=SimpleNamespace())

    def table(self, name):
        return FakeQuery(self, name)


def seed_tables(today: date | None = None) -> dict[str, list[dict]]:
    today = today or datetime.now(timezone.utc).date()
    now = datetime.now(timezone.utc)
    return {
        "profiles": [
            {"id": str(CUSTOMER_ID), "role": "customer", "full_name": "Anna Berger", "phone": None},
            {"id": str(CAREGIVER_ID), "role": "caregiver", "full_name": "Maja Novak", "phone": None},
            {"id": str(ADMIN_ID), "role": "admin", "full_name": "Office", "phone": None},
            {"id": str(STRANGER_ID), "role": "nurse", "full_name": "Unknown Role", "phone": None},
        ],
        "patients": [
            {"id": str(P1), "display_name": "Maria Huber", "birth_date": "1938-04-02", "notes": "Diabetes"},
            {"id": str(P2), "display_name": "Anton Gruber", "birth_date": None, "notes": None},
            {"id": str(P3), "display_name": "Zora Kovač", "birth_date": None, "notes": None},
            {"id": str(P4), "display_name": "Bruno Lang", "birth_date": None, "notes": None},
        ],
        "customer_patient_access": [
            {"customer_id": str(CUSTOMER_ID), "patient_id": str(P1)},
        ],
        "caregiver_assignments": [
            {
                "caregiver_id": str(CAREGIVER_ID),
                "patient_id": str(P3),
                "start_date": (today - timedelta(days=30)).isoformat(),
                "end_date": (today - timedelta(days=1)).isoformat(),
            },
            {
                "caregiver_id": str(CAREGIVER_ID),
                "patient_id": str(P4),
                "start_date": (today - timedelta(days=10)).isoformat(),
                "end_date": None,
            },
        ],
        "vitals": [
            {
                "id": 1, "patient_id": str(P1), "type": "blood_pressure",
                "systolic": 135, "diastolic": 85, "value": None,
                "measured_at": iso(now - timedelta(days=2)),
            },
            {
                "id": 2, "patient_id": str(P1), "type": "heart_rate",
                "systolic": None, "diastolic": None, "value": 72,
                "measured_at": iso(now - timedelta(days=1)),
            },
            {
                "id": 3, "patient_id": str(P1), "type": "heart_rate",
                "systolic": None, "diastolic": None, "value": 80,
                "measured_at": iso(now - timedelta(days=60)),
            },
            {
                "id": 4, "patient_id": str(P2), "type": "temperature",
                "systolic": None, "diastolic": None, "value": 37.1,
                "measured_at": iso(now - timedelta(days=1)),
            },
        ],
        "care_logs": [
            {
                "id": 10, "patient_id": str(P1), "slot": "morning", "title": None,
                "details": "Frühstück gut gegessen", "mood": "🙂", "completed": True,
                "occurred_at": iso(now - timedelta(hours=5)),
            },
            {
                "id": 11, "patient_id": str(P1), "slot": "evening", "title": "Spaziergang",
                "details": None, "mood": None, "completed": True,
                "occurred_at": iso(now - timedelta(days=20)),
            },
        ],
        "tasks": [
            {
                "id": 20, "patient_id": str(P1), "title": "Rezept abholen",
                "due_at": None, "status": "in_progress",
                "created_at": iso(now - timedelta(days=1)),
            },
        ],
        "documents": [
            {
                "id": 30, "patient_id": str(P1), "path": "patients/p1/arztbrief.pdf",
                "label": None, "created_at": iso(now - timedelta(days=3)),
            },
            {
                "id": 31, "patient_id": str(P2), "path": "patients/p2/befund.pdf",
                "label": "Befund", "created_at": iso(now - timedelta(days=3)),
            },
        ],
    }


def make_token(
    user_id: uuid.UUID,
    expires_in: int = 3600,
    issued_ago: int = 60,
    secret: str | None = None,
) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "email": f"{user_id.hex[-4:]}@example.com",
        "iat": int((now - timedelta(seconds=issued_ago)).timestamp()),
        "exp": int((now + timedelta(seconds=expires_in)).timestamp()),
        "aud": "authenticated",
    }
    return jwt.encode(claims, secret or settings.SUPABASE_JWT_SECRET, algorithm="HS256")


def auth_header(user_id: uuid.UUID) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def store():
    return FakeSupabase(seed_tables())


@pytest.fixture
def api(store):
    """TestClient with the store and session hub swapped for fakes."""
    from fastapi.testclient import TestClient

    from app.core.session_events import SessionEvents, get_session_events
    from app.core.supabase_client import get_auth_client, get_store_client
    from app.main import app

    events = SessionEvents()
    app.dependency_overrides[get_store_client] = lambda: store
    app.dependency_overrides[get_auth_client] = lambda: store
    app.dependency_overrides[get_session_events] = lambda: events

    with TestClient(app) as client:
        # The language choice is persisted; start every test from German.
        app.state.language_context.set_language("de")
        client.events = events
        yield client

    app.dependency_overrides.clear()
