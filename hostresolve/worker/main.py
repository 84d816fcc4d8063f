from __future__ import annotations

import asyncio
import logging

from hostresolve.jobqueue.ops import AdmissionGate, RequestQueue
from hostresolve.pipeline.aggregate import ResultAggregator
from hostresolve.pipeline.dns_resolve import Lookup, ResolveResult
from hostresolve.pipeline.models import ResolutionOutcome, ResolutionRequest

logger = logging.getLogger(__name__)


async def _lookup(lookup: Lookup, request: ResolutionRequest) -> ResolutionOutcome:
    try:
        result = await asyncio.to_thread(lookup, request.hostname)
    except Exception as e:
        # Lookup failures are data, not worker failures.
        result = ResolveResult(name=request.hostname, ips=[], error=f"lookup {request.hostname}: {e}")

    if result.error:
        logger.debug("%s: %s", request.source_path, result.error)
    return ResolutionOutcome(
        source_path=request.source_path,
        hostname=request.hostname,
        addresses=tuple(result.ips),
        failure=result.error,
    )


async def resolver_worker(
    worker_id: int,
    queue: RequestQueue,
    gate: AdmissionGate,
    aggregator: ResultAggregator,
    lookup: Lookup,
    stop: asyncio.Event,
) -> int:
    """Resolve requests until stopped. Returns the number of requests handled."""
    handled = 0
    while not stop.is_set():
        request = await queue.get()
        try:
            if request is None:
                break
            async with gate.slot():
                outcome = await _lookup(lookup, request)
                await aggregator.append(outcome)
            handled += 1
        finally:
            # Acknowledge only after the outcome is recorded and the gate slot is free.
            queue.done(request)
    logger.debug("Resolver %d stopping after %d requests", worker_id, handled)
    return handled
