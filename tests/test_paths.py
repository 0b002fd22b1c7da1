from __future__ import annotations

import os
import random
from pathlib import Path, PurePosixPath

import pytest

from jellyfish.domain.paths import ForbiddenPathError, SanitizedPath, sanitize


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("", ()),
        ("/", ()),
        ("////", ()),
        ("/index.html", ("index.html",)),
        ("/docs/report.pdf", ("docs", "report.pdf")),
        ("/a/./b/", ("a", "b")),
        ("/a//b", ("a", "b")),
        ("/a/b/../c", ("a", "c")),
        ("/a/..", ()),
        ("/a%20b/c%2Fd", ("a b", "c", "d")),
        ("/a/%2e%2e/b", ("b",)),
        ("/caf%C3%A9.txt", ("café.txt",)),
        ("/dir\\file.txt", ("dir", "file.txt")),
        ("/...", ("...",)),
    ],
)
def test_sanitize_normalizes(raw: str, expected: tuple[str, ...]) -> None:
    assert sanitize(raw).segments == expected


@pytest.mark.parametrize(
    "raw",
    [
        "/..",
        "/../etc/passwd",
        "/a/../../b",
        "/..%2f..%2fetc%2fpasswd",
        "/%2e%2e/%2e%2e/etc/passwd",
        "/%2E%2E%5Cwindows",
        "/a/%2e%2e/%2e%2e/x",
        "..\\..\\boot.ini",
        "/a%00b",
    ],
)
def test_sanitize_rejects_escapes(raw: str) -> None:
    with pytest.raises(ForbiddenPathError):
        sanitize(raw)


def test_invalid_utf8_is_replaced_not_rejected() -> None:
    path = sanitize(b"/bad%FFname")
    assert path.segments == ("bad\ufffdname",)


def test_bytes_and_str_agree() -> None:
    assert sanitize(b"/docs/%2e/report.pdf") == sanitize("/docs/%2e/report.pdf")


def test_root_properties() -> None:
    root = sanitize("/")
    assert root.segments == ()
    assert root.quoted == "/"
    assert root.relative == ""
    assert root.request_path == "/"
    assert root.join(Path("/srv/www")) == Path("/srv/www")


def test_join_and_request_path() -> None:
    path = sanitize("/docs/./guide/../report.pdf")
    assert path.relative == "docs/report.pdf"
    assert path.request_path == "/docs/report.pdf"
    assert path.join(Path("/srv/www")) == Path("/srv/www/docs/report.pdf")


_ALPHABET = ["a", "b", ".", "..", "/", "\\", "%2e", "%2f", "%2F", "%5c", "%25", "%", "%zz", "~", " ", "é", "\x00"]


def _random_paths(seed: int, count: int) -> list[str]:
    rng = random.Random(seed)
    return ["".join(rng.choice(_ALPHABET) for _ in range(rng.randint(0, 14))) for _ in range(count)]


@pytest.mark.parametrize("raw", _random_paths(seed=1337, count=400))
def test_sanitized_paths_stay_inside_root(raw: str) -> None:
    root = PurePosixPath("/srv/www")
    try:
        path = sanitize(raw)
    except ForbiddenPathError:
        return
    joined = root.joinpath(*path.segments)
    assert ".." not in joined.parts
    assert joined == root or root in joined.parents
    assert os.path.normpath(str(joined)).startswith(str(root))


@pytest.mark.parametrize("raw", _random_paths(seed=7, count=200))
def test_sanitize_is_idempotent(raw: str) -> None:
    try:
        once = sanitize(raw)
    except ForbiddenPathError:
        return
    assert sanitize(once.quoted) == once


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("/%252e%252e/x", ("%2e%2e", "x")),
        ("/a%2541", ("a%41",)),
        ("/100%25.txt", ("100%.txt",)),
        ("/bad%FFname", ("bad\ufffdname",)),
        ("/a b/c%3Fd", ("a b", "c?d")),
    ],
)
def test_quoted_form_round_trips_literal_percents(raw: str, expected: tuple[str, ...]) -> None:
    once = sanitize(raw)
    assert once.segments == expected
    assert sanitize(once.quoted) == once
    assert sanitize(sanitize(once.quoted).quoted) == once


def test_sanitized_path_is_hashable_value() -> None:
    assert SanitizedPath(("a",)) == sanitize("/a")
    assert len({sanitize("/a/"), sanitize("a"), sanitize("/./a")}) == 1
