from __future__ import annotations

from pathlib import Path

from hostresolve.hostfiles.discover import output_path_for
from hostresolve.pipeline.models import ResolutionRequest


def parse_hosts(text: str) -> list[str]:
    """Hostnames listed in a host file, one per line.

    Surrounding whitespace is trimmed; blank lines and lines starting with
    ``#`` are skipped.
    """
    hosts: list[str] = []
    for line in text.splitlines():
        host = line.strip()
        if not host or host.startswith("#"):
            continue
        hosts.append(host)
    return hosts


def read_requests(host_file: Path, suffix: str = ".hosts") -> list[ResolutionRequest]:
    """Read ``host_file`` and build one request per listed host. Raises OSError."""
    source_path = output_path_for(host_file, suffix)
    text = host_file.read_text(encoding="utf-8", errors="replace")
    return [ResolutionRequest(source_path=source_path, hostname=h) for h in parse_hosts(text)]
