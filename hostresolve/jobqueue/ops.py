"""Bounded channels feeding the resolver workers.

``RequestQueue`` carries resolution requests from the traversal to the
workers. ``AdmissionGate`` is a bounded channel of unit tokens that counts
the requests a worker has taken but not yet finished.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from hostresolve.pipeline.models import ResolutionRequest


class QueueClosedError(Exception):
    pass


class RequestQueue:
    """Bounded multi-producer/multi-consumer queue of ResolutionRequest.

    Every item handed out by ``get`` must be acknowledged with ``done`` once
    its outcome has been recorded; ``join`` waits until every request ever
    put has been acknowledged.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError("queue capacity must be at least 1")
        self.capacity = capacity
        self._queue: asyncio.Queue[ResolutionRequest | None] = asyncio.Queue(maxsize=capacity)
        self._closed = False
        self._outstanding = 0
        self.submitted = 0

    def __len__(self) -> int:
        return self._queue.qsize()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def outstanding(self) -> int:
        """Requests put but not yet acknowledged (queued or in a worker)."""
        return self._outstanding

    async def put(self, request: ResolutionRequest) -> None:
        if self._closed:
            raise QueueClosedError("request queue is closed")
        await self._queue.put(request)
        self._outstanding += 1
        self.submitted += 1

    async def get(self) -> ResolutionRequest | None:
        """Next request, or None once the queue has been released to a worker."""
        return await self._queue.get()

    def done(self, request: ResolutionRequest | None) -> None:
        if request is not None:
            self._outstanding -= 1
        self._queue.task_done()

    def close(self) -> None:
        """No further requests will be put."""
        self._closed = True

    async def release_workers(self, count: int) -> None:
        """Hand one close marker to each of ``count`` waiting workers."""
        self._closed = True
        for _ in range(count):
            await self._queue.put(None)

    async def join(self) -> None:
        await self._queue.join()


class AdmissionGate:
    """Counting gate bounding how many requests are being resolved at once."""

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError("gate capacity must be at least 1")
        self.capacity = capacity
        self._tokens: asyncio.Queue[None] = asyncio.Queue(maxsize=capacity)

    def __len__(self) -> int:
        return self._tokens.qsize()

    async def admit(self) -> None:
        await self._tokens.put(None)

    def release(self) -> None:
        self._tokens.get_nowait()
        self._tokens.task_done()

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        await self.admit()
        try:
            yield
        finally:
            self.release()
