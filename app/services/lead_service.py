# app/services/lead_service.py
import logging

import httpx

from app.core.config import get_settings
from app.i18n.translator import LanguageContext
from app.schemas.lead import LeadCreate, LeadResult

settings = get_settings()

logger = logging.getLogger(__name__)


class LeadService:
    """
    Forwards lead-capture submissions to the Supabase Edge Function.

    Single fire-and-forget POST; no retries, no local state.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self.transport = transport

    @property
    def endpoint(self) -> str:
        return f"{settings.SUPABASE_URL.rstrip('/')}/functions/v1/{settings.LEAD_CAPTURE_FUNCTION}"

    async def submit(self, payload: LeadCreate, i18n: LanguageContext) -> LeadResult:
        headers = {
            "apikey": settings.SUPABASE_KEY,
            "Authorization": f"Bearer {settings.SUPABASE_KEY}",
        }
        try:
            async with httpx.AsyncClient(
                transport=self.transport,
                timeout=settings.STORE_TIMEOUT_SECONDS,
            ) as http:
                response = await http.post(
                    self.endpoint,
                    json=payload.model_dump(exclude_none=True),
                    headers=headers,
                )
        except httpx.HTTPError as exc:
            logger.error("Error submitting lead: %s", exc)
            return LeadResult(success=False, error="Network error")

        if response.is_error:
            return LeadResult(success=False, error=_error_message(response))

        logger.info("Lead submitted (type=%s)", payload.type)
        return LeadResult(success=True, message=i18n.t(f"lead.{payload.type}.success"))


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return "Failed to submit lead"
