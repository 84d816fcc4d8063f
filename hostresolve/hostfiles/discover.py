from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


def is_host_file(name: str, suffix: str = ".hosts") -> bool:
    """``foo.hosts`` matches, a file named exactly ``.hosts`` does not."""
    return name.endswith(suffix) and name != suffix


def output_path_for(host_file: Path, suffix: str = ".hosts") -> Path:
    """Where results for ``host_file`` go: the same path without the suffix."""
    name = host_file.name
    if not is_host_file(name, suffix):
        raise ValueError(f"{host_file} does not end in {suffix}")
    return host_file.with_name(name[: -len(suffix)])


def discover_host_files(root: Path, suffix: str = ".hosts", *, recursive: bool = False) -> Iterator[Path]:
    """Yield host-list files under ``root`` in lexical order.

    Only ``root`` itself is scanned unless ``recursive`` is set.
    """
    def _on_error(err: OSError) -> None:
        logger.warning("Cannot read %s: %s", err.filename, err.strerror or err)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        if recursive:
            dirnames.sort()
        else:
            dirnames[:] = []
        for name in sorted(filenames):
            if is_host_file(name, suffix):
                yield Path(dirpath) / name
