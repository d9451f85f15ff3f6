# app/routers/leads.py
from fastapi import APIRouter, Depends, Response, status

from app.i18n.translator import LanguageContext, get_language_context
from app.schemas.lead import LeadCreate, LeadResult
from app.services.lead_service import LeadService

router = APIRouter(prefix="/leads", tags=["Leads"])

service = LeadService()


@router.post("", response_model=LeadResult)
async def submit_lead(
    payload: LeadCreate,
    response: Response,
    i18n: LanguageContext = Depends(get_language_context),
):
    """
    Lead-capture form (customer or caregiver) from the marketing site.

    Public endpoint. Invalid payloads are rejected with 422 before anything
    is sent; a failed hand-off answers 502 with `error` set.
    """
    result = await service.submit(payload, i18n)
    if not result.success:
        response.status_code = status.HTTP_502_BAD_GATEWAY
    return result
