import asyncio
import logging
from typing import Awaitable, Callable, Dict, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InFlightDeduplicator(Generic[T]):
    """
    Run at most one computation per fingerprint at a time.

    Callers that submit a fingerprint while its computation is still running
    wait on that same computation and get the same result (or the same
    exception). Once it settles the entry is dropped, so nothing is cached:
    the next submission starts fresh work.

    Only safe within a single event loop; check-and-insert in `submit` happens
    without a suspension point, so no lock is needed.
    """

    def __init__(self) -> None:
        self._pending: Dict[str, "asyncio.Future[T]"] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, fingerprint: str) -> bool:
        task = self._pending.get(fingerprint)
        return task is not None and not task.done()

    async def submit(self, fingerprint: str, computation: Callable[[], Awaitable[T]]) -> T:
        task = self._pending.get(fingerprint)
        if task is not None and not task.done():
            logger.debug("Joining in-flight request %s", fingerprint)
        else:
            task = asyncio.ensure_future(computation())
            self._pending[fingerprint] = task
            task.add_done_callback(lambda done: self._settle(fingerprint, done))
        # a caller going away must not cancel work other callers are waiting on
        return await asyncio.shield(task)

    def _settle(self, fingerprint: str, task: "asyncio.Future[T]") -> None:
        if self._pending.get(fingerprint) is task:
            del self._pending[fingerprint]
