"""Write drained resolution outcomes to their per-source output files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, TextIO

from hostresolve.pipeline.models import ResolutionOutcome

logger = logging.getLogger(__name__)


def write_outcomes(outcomes: Iterable[ResolutionOutcome]) -> dict:
    """Write each outcome's block to its source path, in the order given.

    Each destination is created (truncated) on first use. Once creating or
    writing a destination fails, every later outcome for it is skipped.

    Returns a summary dict of what was written.
    """
    summary = {"files_written": [], "files_failed": [], "blocks_written": 0, "blocks_skipped": 0}
    handles: dict[Path, TextIO] = {}
    failed: set[Path] = set()
    written: dict[Path, int] = {}

    try:
        for outcome in outcomes:
            path = outcome.source_path
            if path in failed:
                summary["blocks_skipped"] += 1
                continue

            f = handles.get(path)
            if f is None:
                try:
                    f = open(path, "w", encoding="utf-8")
                except OSError as e:
                    logger.warning("Cannot create %s: %s", path, e)
                    failed.add(path)
                    summary["blocks_skipped"] += 1
                    continue
                handles[path] = f

            output = outcome.render()
            try:
                n = f.write(output)
                # Surface device errors on this block rather than at close.
                f.flush()
            except OSError as e:
                logger.warning("Write to %s failed: %s", path, e)
                failed.add(path)
                summary["blocks_skipped"] += 1
                continue
            if n != len(output):
                logger.warning("%s: expected to write %d characters, actually wrote %d.", path, len(output), n)
                failed.add(path)
                summary["blocks_skipped"] += 1
                continue
            written[path] = written.get(path, 0) + 1
    finally:
        for path, f in handles.items():
            try:
                f.close()
            except OSError as e:
                logger.warning("Closing %s failed: %s", path, e)
                failed.add(path)
                summary["blocks_skipped"] += written.pop(path, 0)

    summary["blocks_written"] = sum(written.values())
    summary["files_written"] = [str(p) for p in handles if p not in failed]
    summary["files_failed"] = sorted(str(p) for p in failed)
    return summary
