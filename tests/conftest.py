from __future__ import annotations

import random
import threading
import time

import pytest

from hostresolve.pipeline.dns_resolve import ResolveResult


class FakeLookup:
    """Thread-safe stand-in for a DNS lookup.

    ``answers`` maps hostnames to address lists; names missing from it fail
    with a "no such host" error unless ``default`` is given.
    """

    def __init__(self, answers: dict[str, list[str]] | None = None, *, default=None, delay: float = 0.0, jitter: float = 0.0):
        self.answers = answers or {}
        self.default = default
        self.delay = delay
        self.jitter = jitter
        self.calls: list[str] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def __call__(self, name: str) -> ResolveResult:
        with self._lock:
            self.calls.append(name)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            pause = self.delay + (random.random() * self.jitter if self.jitter else 0.0)
            if pause:
                time.sleep(pause)
            if name in self.answers:
                return ResolveResult(name=name, ips=list(self.answers[name]))
            if self.default is not None:
                return ResolveResult(name=name, ips=list(self.default(name)))
            return ResolveResult(name=name, ips=[], error=f"lookup {name}: no such host")
        finally:
            with self._lock:
                self.active -= 1


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: unit tests (fast, hermetic)")
    config.addinivalue_line("markers", "integration: integration tests (multi-component, filesystem)")
    config.addinivalue_line("markers", "stress: many concurrent requests through the worker pool")


@pytest.fixture
def fake_lookup():
    return FakeLookup


@pytest.fixture
def write_host_file(tmp_path):
    def _write(name: str, text: str, directory=None):
        path = (directory or tmp_path) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
