# app/core/errors.py
"""
Error taxonomy shared by the auth guard, the visibility resolver and the
routers.

All errors are HTTPException subclasses so FastAPI renders them directly;
the only custom handler is the fallback for anything unexpected.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from app.core.config import get_settings

settings = get_settings()

logger = logging.getLogger(__name__)


class NotAuthenticated(HTTPException):
    """
    No usable session. Clients follow `Location` to the login view.
    """

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={
                "WWW-Authenticate": "Bearer",
                "Location": settings.LOGIN_PATH,
            },
        )


class NotFound(HTTPException):
    def __init__(self, detail: str = "Patient not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class NotAuthorized(NotFound):
    """
    Caller may not see this patient.

    Rendered exactly like NotFound so the response never confirms that a
    patient exists.
    """


class TransientFetchFailure(HTTPException):
    """
    The platform failed or timed out. Not retried; surfaced to the user as
    a dismissable notification.
    """

    def __init__(self, detail: str = "Failed to load data, please try again"):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
        )


class ValidationFailure(HTTPException):
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
        )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last line of defense: log and answer with a generic 500."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Something went wrong"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Exception, unhandled_exception_handler)
