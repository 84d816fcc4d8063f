from __future__ import annotations

import asyncio

from hostresolve.pipeline.models import ResolutionOutcome


class ResultAggregator:
    """Append-only collection of outcomes shared by all resolver workers.

    Appends are serialized through a lock. ``outcomes`` is only read once
    the pipeline has drained, when no writer is left.
    """

    def __init__(self):
        self._lock = asyncio.Lock()
        self._outcomes: list[ResolutionOutcome] = []

    def __len__(self) -> int:
        return len(self._outcomes)

    async def append(self, outcome: ResolutionOutcome) -> None:
        async with self._lock:
            self._outcomes.append(outcome)

    @property
    def outcomes(self) -> list[ResolutionOutcome]:
        return list(self._outcomes)

    def failures(self) -> list[ResolutionOutcome]:
        return [o for o in self._outcomes if o.failed]
