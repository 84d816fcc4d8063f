from __future__ import annotations

import socket

import dns.exception
import dns.resolver
import pytest

from hostresolve.pipeline import dns_resolve
from hostresolve.pipeline.dns_resolve import make_lookup, resolve_dns, resolve_system


class _FakeResolver:
    def __init__(self, records: dict[str, list[str] | Exception]):
        self.records = records
        self.queries: list[tuple[str, str]] = []
        self.timeout = None
        self.lifetime = None

    def resolve(self, name, rdtype, raise_on_no_answer=True):
        self.queries.append((name, rdtype))
        answer = self.records.get(rdtype, [])
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.fixture
def fake_dns(monkeypatch):
    def _install(records):
        resolver = _FakeResolver(records)

        def _factory(timeout, lifetime):
            resolver.timeout = timeout
            resolver.lifetime = lifetime
            return resolver

        monkeypatch.setattr(dns_resolve, "_resolver", _factory)
        return resolver

    return _install


@pytest.mark.unit
def test_resolve_dns_collects_a_then_aaaa(fake_dns) -> None:
    resolver = fake_dns({"A": ["93.184.216.34", "93.184.216.34"], "AAAA": ["2606:2800:220:1::1"]})

    result = resolve_dns("example.com", timeout=1.5, lifetime=4.0)

    assert result.error is None
    assert result.ips == ["93.184.216.34", "2606:2800:220:1::1"]
    assert resolver.queries == [("example.com", "A"), ("example.com", "AAAA")]
    assert (resolver.timeout, resolver.lifetime) == (1.5, 4.0)


@pytest.mark.unit
def test_resolve_dns_no_address_records_is_empty_success(fake_dns) -> None:
    fake_dns({"A": dns.resolver.NoAnswer(), "AAAA": []})

    result = resolve_dns("mx-only.example")

    assert result.error is None
    assert result.ips == []


@pytest.mark.unit
@pytest.mark.parametrize(
    ("exc", "message"),
    [
        (dns.resolver.NXDOMAIN(), "lookup bad.invalid: no such host"),
        (dns.resolver.NoNameservers(), "lookup bad.invalid: no nameserver answered"),
        (dns.exception.Timeout(), "lookup bad.invalid: i/o timeout"),
    ],
)
def test_resolve_dns_failures_become_error_text(fake_dns, exc, message) -> None:
    fake_dns({"A": exc})

    result = resolve_dns("bad.invalid")

    assert result.ips == []
    assert result.error == message


@pytest.mark.unit
@pytest.mark.parametrize("exc", [dns.resolver.NoNameservers(), dns.exception.Timeout()])
def test_resolve_dns_keeps_a_records_when_aaaa_query_fails(fake_dns, exc) -> None:
    fake_dns({"A": ["93.184.216.34"], "AAAA": exc})

    result = resolve_dns("example.com")

    assert result.error is None
    assert result.ips == ["93.184.216.34"]


@pytest.mark.unit
def test_resolve_dns_keeps_aaaa_records_when_a_query_times_out(fake_dns) -> None:
    fake_dns({"A": dns.exception.Timeout(), "AAAA": ["2606:2800:220:1::1"]})

    result = resolve_dns("example.com")

    assert result.error is None
    assert result.ips == ["2606:2800:220:1::1"]


@pytest.mark.unit
def test_resolve_dns_both_families_failing_reports_first_error(fake_dns) -> None:
    fake_dns({"A": dns.exception.Timeout(), "AAAA": dns.resolver.NoNameservers()})

    result = resolve_dns("example.com")

    assert result.ips == []
    assert result.error == "lookup example.com: i/o timeout"


@pytest.mark.unit
def test_resolve_dns_unexpected_error_is_reported(fake_dns) -> None:
    fake_dns({"A": ValueError("label too long")})

    result = resolve_dns("x" * 300)

    assert result.error.endswith("label too long")


@pytest.mark.unit
def test_resolve_system_uses_getaddrinfo(monkeypatch) -> None:
    infos = [
        (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("127.0.0.1", 0)),
        (socket.AF_INET6, socket.SOCK_STREAM, 6, "", ("::1", 0, 0, 0)),
        (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("127.0.0.1", 0)),
    ]
    monkeypatch.setattr(dns_resolve.socket, "getaddrinfo", lambda *args, **kwargs: infos)

    result = resolve_system("localhost")

    assert result.error is None
    assert result.ips == ["127.0.0.1", "::1"]


@pytest.mark.unit
def test_resolve_system_failure(monkeypatch) -> None:
    def _fail(*args, **kwargs):
        raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

    monkeypatch.setattr(dns_resolve.socket, "getaddrinfo", _fail)

    result = resolve_system("bad.invalid")

    assert result.ips == []
    assert result.error == "lookup bad.invalid: Name or service not known"


@pytest.mark.unit
def test_make_lookup_selects_backend() -> None:
    assert make_lookup("system") is resolve_system
    assert make_lookup("dns", timeout=1.0, lifetime=2.0).func is resolve_dns
    with pytest.raises(ValueError):
        make_lookup("carrier-pigeon")
