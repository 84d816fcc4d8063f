from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from hostresolve.jobqueue.ops import AdmissionGate, RequestQueue

logger = logging.getLogger(__name__)


class DrainError(Exception):
    pass


class DrainDetector:
    """Blocks until every submitted request has an outcome recorded.

    Waits on the request queue's completion count, which goes up once per
    submitted request and down once per acknowledged one, then confirms
    that nothing is queued and no gate slot is held.
    """

    def __init__(self, queue: RequestQueue, gate: AdmissionGate, *, log_every: float = 5.0):
        self._queue = queue
        self._gate = gate
        self._log_every = log_every

    def quiescent(self) -> bool:
        return len(self._queue) == 0 and len(self._gate) == 0

    async def wait(self, workers: Iterable[asyncio.Task] = ()) -> None:
        workers = set(workers)
        joined = asyncio.ensure_future(self._queue.join())
        try:
            while True:
                done, _ = await asyncio.wait(
                    {joined, *workers},
                    timeout=self._log_every,
                    return_when=asyncio.FIRST_COMPLETED,
                )
                if joined in done:
                    break
                if done:
                    # A worker exited while requests were still outstanding.
                    for task in done:
                        if not task.cancelled() and task.exception() is not None:
                            raise DrainError("resolver worker failed") from task.exception()
                    raise DrainError(f"resolver worker exited with {self._queue.outstanding} requests outstanding")
                logger.info(
                    "Waiting on %d outstanding requests (%d queued, %d resolving)",
                    self._queue.outstanding, len(self._queue), len(self._gate),
                )
        finally:
            if not joined.done():
                joined.cancel()

        if not self.quiescent():
            raise DrainError(
                f"pipeline not quiescent after drain: {len(self._queue)} queued, {len(self._gate)} resolving"
            )
