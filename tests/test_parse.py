from __future__ import annotations

from pathlib import Path

import pytest

from hostresolve.hostfiles.parse import parse_hosts, read_requests
from hostresolve.pipeline.models import ResolutionRequest


@pytest.mark.unit
def test_parse_hosts_skips_blank_and_comment_lines() -> None:
    text = "example.com\n\n# comment\nbad.invalid\n"
    assert parse_hosts(text) == ["example.com", "bad.invalid"]


@pytest.mark.unit
def test_parse_hosts_trims_whitespace_and_handles_crlf() -> None:
    text = "  one.example  \r\n\t\r\n   # indented comment\r\ntwo.example\t"
    assert parse_hosts(text) == ["one.example", "two.example"]


@pytest.mark.unit
def test_parse_hosts_keeps_hash_inside_a_line() -> None:
    assert parse_hosts("host#1.example") == ["host#1.example"]


@pytest.mark.unit
def test_parse_hosts_empty_text() -> None:
    assert parse_hosts("") == []
    assert parse_hosts("\n\n# only comments\n") == []


@pytest.mark.unit
def test_read_requests_strips_suffix_for_source_path(write_host_file, tmp_path: Path) -> None:
    host_file = write_host_file("a.hosts", "example.com\n\n# comment\nbad.invalid\n")

    requests = read_requests(host_file)

    assert requests == [
        ResolutionRequest(source_path=tmp_path / "a", hostname="example.com"),
        ResolutionRequest(source_path=tmp_path / "a", hostname="bad.invalid"),
    ]


@pytest.mark.unit
def test_read_requests_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        read_requests(tmp_path / "gone.hosts")
