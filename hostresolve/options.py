"""Per-run options for a resolve pass.

Merges the environment-driven defaults from ``config.settings`` with
overrides coming from the command line, and validates the result.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from hostresolve.config import settings


class ResolveOptions(BaseModel):
    root: Path
    suffix: str = ".hosts"
    recursive: bool = False
    workers: int = Field(default=4, ge=1)
    queue_factor: int = Field(default=2, ge=1)
    resolver: Literal["dns", "system"] = "dns"
    dns_timeout: float = Field(default=2.0, gt=0)
    dns_lifetime: float = Field(default=3.0, gt=0)
    drain_log_seconds: float = Field(default=5.0, gt=0)

    @field_validator("root", mode="before")
    @classmethod
    def _clean_root(cls, value):
        return Path(os.path.normpath(str(value)))

    @field_validator("suffix")
    @classmethod
    def _check_suffix(cls, value: str) -> str:
        value = value.strip()
        if not value or "/" in value or os.sep in value:
            raise ValueError("suffix must be a non-empty file name ending")
        return value

    @property
    def queue_capacity(self) -> int:
        return self.workers * self.queue_factor

    @property
    def gate_capacity(self) -> int:
        return self.workers + 1


def parse_options(overrides: dict | None = None) -> ResolveOptions:
    """Build ResolveOptions from settings defaults, applying non-None overrides."""
    defaults = {
        "root": settings.RESOLVE_DIR,
        "suffix": settings.HOSTS_SUFFIX,
        "recursive": settings.RESOLVE_RECURSIVE,
        "workers": settings.NUM_RESOLVERS,
        "queue_factor": settings.RESOLVE_QUEUE_FACTOR,
        "resolver": settings.RESOLVER_BACKEND,
        "dns_timeout": settings.DNS_TIMEOUT,
        "dns_lifetime": settings.DNS_LIFETIME,
        "drain_log_seconds": settings.DRAIN_LOG_SECONDS,
    }
    merged = {**defaults, **{k: v for k, v in (overrides or {}).items() if v is not None}}
    return ResolveOptions(**merged)
