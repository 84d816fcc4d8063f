from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path

from hostresolve.hostfiles.discover import discover_host_files
from hostresolve.hostfiles.output import write_outcomes
from hostresolve.hostfiles.parse import read_requests
from hostresolve.jobqueue.ops import AdmissionGate, RequestQueue
from hostresolve.options import ResolveOptions
from hostresolve.pipeline.aggregate import ResultAggregator
from hostresolve.pipeline.dns_resolve import Lookup, make_lookup
from hostresolve.pipeline.drain import DrainDetector
from hostresolve.pipeline.models import ResolutionOutcome, ResolutionRequest
from hostresolve.worker.main import resolver_worker

logger = logging.getLogger(__name__)


class StartupError(Exception):
    pass


def validate_root(root: Path) -> Path:
    """Make sure the directory to scan exists and is a directory."""
    if not root.exists():
        raise StartupError(f"stat {root}: no such file or directory")
    if not root.is_dir():
        raise StartupError(f"{root} is not a directory")
    return root


class ResolvePipeline:
    """Worker pool resolving submitted requests into a shared aggregator.

    Usage::

        async with ResolvePipeline(lookup, workers=4) as pipeline:
            await pipeline.submit(request)
            outcomes = await pipeline.drain()
    """

    def __init__(
        self,
        lookup: Lookup,
        *,
        workers: int = 4,
        queue_capacity: int | None = None,
        gate_capacity: int | None = None,
        drain_log_seconds: float = 5.0,
    ):
        if workers < 1:
            raise ValueError("need at least one resolver worker")
        self.lookup = lookup
        self.workers = workers
        self.queue = RequestQueue(queue_capacity or workers * 2)
        self.gate = AdmissionGate(gate_capacity or workers + 1)
        self.aggregator = ResultAggregator()
        self.detector = DrainDetector(self.queue, self.gate, log_every=drain_log_seconds)
        self._stop = asyncio.Event()
        self._tasks: list[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return bool(self._tasks) and not self._stop.is_set()

    async def start(self) -> None:
        if self._tasks:
            raise RuntimeError("pipeline already started")
        self._tasks = [
            asyncio.create_task(
                resolver_worker(i, self.queue, self.gate, self.aggregator, self.lookup, self._stop),
                name=f"resolver-{i}",
            )
            for i in range(self.workers)
        ]
        logger.debug(
            "Started %d resolvers (queue=%d, gate=%d)",
            self.workers, self.queue.capacity, self.gate.capacity,
        )

    async def submit(self, request: ResolutionRequest) -> None:
        if not self._tasks:
            raise RuntimeError("pipeline not started")
        await self.queue.put(request)

    def close(self) -> None:
        """Signal that no more requests will be submitted."""
        self.queue.close()

    async def drain(self) -> list[ResolutionOutcome]:
        """Wait until every submitted request has an outcome, then return them."""
        self.close()
        await self.detector.wait(self._tasks)
        outcomes = self.aggregator.outcomes
        if len(outcomes) != self.queue.submitted:
            raise RuntimeError(f"{self.queue.submitted} requests submitted but {len(outcomes)} outcomes recorded")
        return outcomes

    async def shutdown(self) -> list[int]:
        """Stop the workers and wait for them to exit.

        Returns how many requests each worker handled.
        """
        if not self._tasks:
            return []
        self._stop.set()
        alive = [t for t in self._tasks if not t.done()]
        if alive and self.queue.outstanding == 0:
            await self.queue.release_workers(len(alive))
        else:
            for task in alive:
                task.cancel()
        results = await asyncio.gather(*self._tasks, return_exceptions=True)
        return [r if isinstance(r, int) else 0 for r in results]

    async def __aenter__(self) -> ResolvePipeline:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()


async def run_pipeline(options: ResolveOptions, *, lookup: Lookup | None = None) -> dict:
    """Resolve every host file under options.root and write the output files.

    Returns a summary dict of the run.
    """
    root = validate_root(options.root)
    if lookup is None:
        lookup = make_lookup(options.resolver, timeout=options.dns_timeout, lifetime=options.dns_lifetime)

    start_time = datetime.now()
    host_files: list[str] = []
    host_files_failed: list[str] = []

    async with ResolvePipeline(
        lookup,
        workers=options.workers,
        queue_capacity=options.queue_capacity,
        gate_capacity=options.gate_capacity,
        drain_log_seconds=options.drain_log_seconds,
    ) as pipeline:
        for host_file in discover_host_files(root, options.suffix, recursive=options.recursive):
            try:
                requests = read_requests(host_file, options.suffix)
            except OSError as e:
                logger.warning("Skipping %s: %s", host_file, e)
                host_files_failed.append(str(host_file))
                continue
            host_files.append(str(host_file))
            for request in requests:
                await pipeline.submit(request)
        logger.debug("Queued %d requests from %d host files", pipeline.queue.submitted, len(host_files))
        outcomes = await pipeline.drain()

    report = write_outcomes(outcomes)
    failed = sum(1 for o in outcomes if o.failed)
    return {
        "root": str(root),
        "host_files": len(host_files),
        "host_files_failed": host_files_failed,
        "requests": len(outcomes),
        "resolved": len(outcomes) - failed,
        "failed": failed,
        "files_written": report["files_written"],
        "files_failed": report["files_failed"],
        "blocks_written": report["blocks_written"],
        "blocks_skipped": report["blocks_skipped"],
        "elapsed_seconds": round((datetime.now() - start_time).total_seconds(), 2),
    }
