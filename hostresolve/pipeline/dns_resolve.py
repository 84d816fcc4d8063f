from __future__ import annotations

import socket
from dataclasses import dataclass
from functools import partial
from typing import Callable, Iterable

import dns.exception
import dns.resolver


@dataclass(frozen=True)
class ResolveResult:
    name: str
    ips: list[str]
    error: str | None = None


Lookup = Callable[[str], ResolveResult]


def _resolver(timeout: float, lifetime: float) -> dns.resolver.Resolver:
    r = dns.resolver.Resolver()
    r.timeout = timeout
    r.lifetime = lifetime
    return r


def _dedupe(ips: Iterable[str]) -> list[str]:
    # De-dupe while preserving order.
    seen: set[str] = set()
    out: list[str] = []
    for ip in ips:
        if ip and ip not in seen:
            seen.add(ip)
            out.append(ip)
    return out


def resolve_dns(name: str, *, timeout: float = 2.0, lifetime: float = 3.0) -> ResolveResult:
    """Forward lookup of A then AAAA records through dnspython.

    A name that exists but has no address records resolves successfully
    with an empty address list. A family whose query fails (SERVFAIL,
    timeout) is only reported when the other family found nothing.
    """
    r = _resolver(timeout, lifetime)
    ips: list[str] = []
    family_error: str | None = None
    try:
        for rdtype in ("A", "AAAA"):
            try:
                answers = r.resolve(name, rdtype, raise_on_no_answer=False)
            except dns.resolver.NXDOMAIN:
                return ResolveResult(name=name, ips=[], error=f"lookup {name}: no such host")
            except dns.resolver.NoAnswer:
                continue
            except dns.resolver.NoNameservers:
                family_error = family_error or f"lookup {name}: no nameserver answered"
                continue
            except dns.exception.Timeout:
                family_error = family_error or f"lookup {name}: i/o timeout"
                continue
            ips.extend(str(a).strip() for a in answers or ())
    except Exception as e:
        return ResolveResult(name=name, ips=[], error=f"lookup {name}: {e}")

    ips = _dedupe(ips)
    if not ips and family_error:
        return ResolveResult(name=name, ips=[], error=family_error)
    return ResolveResult(name=name, ips=ips)


def resolve_system(name: str) -> ResolveResult:
    """Forward lookup through the host's resolver (getaddrinfo, honours /etc/hosts)."""
    try:
        infos = socket.getaddrinfo(name, None, type=socket.SOCK_STREAM)
    except socket.gaierror as e:
        return ResolveResult(name=name, ips=[], error=f"lookup {name}: {e.strerror or e}")
    except (UnicodeError, OSError) as e:
        return ResolveResult(name=name, ips=[], error=f"lookup {name}: {e}")
    return ResolveResult(name=name, ips=_dedupe(str(info[4][0]) for info in infos))


def make_lookup(backend: str = "dns", *, timeout: float = 2.0, lifetime: float = 3.0) -> Lookup:
    if backend == "dns":
        return partial(resolve_dns, timeout=timeout, lifetime=lifetime)
    if backend == "system":
        return resolve_system
    raise ValueError(f"Unknown resolver backend: {backend}")
