# app/services/guarded_fetch.py
import asyncio
import logging
from typing import Awaitable, TypeVar

from app.core.errors import NotAuthenticated
from app.core.guard import SessionGuard, SessionSource

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GuardedFetch:
    """
    Runs view loads under a SessionGuard.

    - If the session is missing on entry nothing is fetched.
    - If the session goes away while a load is in flight, the load is
      cancelled and its result (if it still arrives) is discarded.
    - Leaving the block cancels whatever is still running and
      unsubscribes from session changes.

    Usage:

        async with GuardedFetch(source) as view:
            detail = await view.run(service.get_patient_detail(...))
    """

    def __init__(self, source: SessionSource):
        self.guard = SessionGuard(source, on_redirect=self._on_redirect)
        self._tasks: set[asyncio.Task] = set()

    async def __aenter__(self) -> "GuardedFetch":
        await self.guard.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.cancel()
        self.guard.teardown()

    async def run(self, work: Awaitable[T]) -> T:
        if not self.guard.is_authorized:
            # Never started: close the coroutine so it is not left dangling.
            close = getattr(work, "close", None)
            if close is not None:
                close()
            raise NotAuthenticated()

        task = asyncio.ensure_future(work)
        self._tasks.add(task)
        try:
            result = await task
        except asyncio.CancelledError:
            if self.guard.redirected:
                raise NotAuthenticated("Session ended while loading")
            raise
        finally:
            self._tasks.discard(task)

        if not self.guard.is_authorized:
            logger.info("Discarding result that finished after session loss")
            raise NotAuthenticated("Session ended while loading")
        return result

    def cancel(self) -> None:
        for task in list(self._tasks):
            if not task.done():
                task.cancel()

    def _on_redirect(self, login_path: str) -> None:
        self.cancel()
