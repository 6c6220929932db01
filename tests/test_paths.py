from __future__ import annotations

import pytest

from browse_app.errors import RepoPathError
from browse_app.paths import parse_repo_path


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("", ()),
        ("/", ()),
        ("src", ("src",)),
        ("src/main.rs", ("src", "main.rs")),
        ("/src//lib/", ("src", "lib")),
        ("./src/.", ("src",)),
        (".github/workflows", (".github", "workflows")),
        ("a*b/c:d", ("a*b", "c:d")),
    ],
)
def test_valid_paths(raw: str, expected: tuple[str, ...]) -> None:
    assert parse_repo_path(raw) == expected


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ("..", "forbidden segment"),
        ("src/../secret", "forbidden segment"),
        ("*glob", "started with an invalid character '*'"),
        ("src/drive:", "ended with an invalid character ':'"),
        ("tag>", "ended with an invalid character '>'"),
        ("tag<", "ended with an invalid character '<'"),
    ],
)
def test_rejected_paths(raw: str, message: str) -> None:
    with pytest.raises(RepoPathError, match=message):
        parse_repo_path(raw)


def test_path_errors_are_value_errors() -> None:
    assert issubclass(RepoPathError, ValueError)
