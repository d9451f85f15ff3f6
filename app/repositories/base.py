# app/repositories/base.py
import asyncio
import logging
from typing import Any, Awaitable

import httpx
from postgrest.exceptions import APIError

from app.core.config import get_settings
from app.core.errors import TransientFetchFailure

settings = get_settings()

logger = logging.getLogger(__name__)


async def bounded(call: Awaitable[Any], what: str) -> Any:
    """
    Await a platform call with the configured timeout.

    Any store, network or timeout failure becomes TransientFetchFailure so
    callers can tell "failed" apart from "no rows".
    """
    try:
        return await asyncio.wait_for(call, timeout=settings.STORE_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.warning("Timed out after %ss: %s", settings.STORE_TIMEOUT_SECONDS, what)
        raise TransientFetchFailure()
    except (APIError, httpx.HTTPError) as exc:
        logger.warning("Platform call failed: %s (%s)", what, exc)
        raise TransientFetchFailure() from exc


async def fetch_rows(query: Any, table: str) -> list[dict[str, Any]]:
    """Execute a PostgREST query builder and return its rows."""
    response = await bounded(query.execute(), f"select {table}")
    return list(response.data or [])
