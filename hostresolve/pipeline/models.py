from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class ResolutionRequest:
    source_path: Path  # output file, i.e. the host file with its suffix stripped
    hostname: str


@dataclass(frozen=True)
class ResolutionOutcome:
    source_path: Path
    hostname: str
    addresses: tuple[str, ...] = field(default_factory=tuple)
    failure: str | None = None

    @property
    def failed(self) -> bool:
        return self.failure is not None

    def render(self) -> str:
        """Text block written to the output file for this outcome."""
        if self.failure is not None:
            return f"# {self.failure}\n"
        lines = [f"# {self.hostname}"]
        lines.extend(self.addresses)
        return "\n".join(lines) + "\n"
