from __future__ import annotations

import io
import os
from pathlib import Path

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "gitsite_core.settings")
for _var, _value in (
    ("GIT_AUTHOR_NAME", "Test Author"),
    ("GIT_AUTHOR_EMAIL", "author@example.com"),
    ("GIT_COMMITTER_NAME", "Test Committer"),
    ("GIT_COMMITTER_EMAIL", "committer@example.com"),
):
    os.environ.setdefault(_var, _value)

import django

django.setup()

import git
import pytest
from git.objects.fun import tree_to_stream
from gitdb.base import IStream

from browse_app.store import EXECUTABLE_MODE, FILE_MODE, TREE_MODE

ACTOR = git.Actor("Test Author", "author@example.com")


class RepoBuilder:
    """Writes objects and refs straight into a bare repository.

    ``tree()`` takes a nested dict: ``bytes`` values become regular files,
    dicts become sub-trees and ``(mode, payload)`` tuples allow any mode,
    where the payload is blob content or, for submodules, a raw 20-byte id.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.repo = git.Repo.init(path, bare=True)

    def close(self) -> None:
        self.repo.close()

    def _store(self, kind: str, data: bytes) -> bytes:
        return self.repo.odb.store(IStream(kind, len(data), io.BytesIO(data))).binsha

    def blob(self, data: bytes) -> bytes:
        return self._store("blob", data)

    def tree(self, layout: dict) -> bytes:
        entries = []
        for name, value in layout.items():
            if isinstance(value, dict):
                entries.append((self.tree(value), TREE_MODE, name))
            elif isinstance(value, bytes):
                entries.append((self.blob(value), FILE_MODE, name))
            else:
                mode, payload = value
                binsha = payload if mode == 0o160000 else self.blob(payload)
                entries.append((binsha, mode, name))
        entries.sort(key=lambda entry: entry[2] + "/" if entry[1] == TREE_MODE else entry[2])
        out = io.BytesIO()
        tree_to_stream(entries, out.write)
        return self._store("tree", out.getvalue())

    def commit(self, layout: dict, message: str = "commit", parents=()) -> git.Commit:
        tree = git.Tree(self.repo, self.tree(layout), TREE_MODE, "")
        return git.Commit.create_from_tree(
            self.repo, tree, message,
            parent_commits=list(parents), head=False,
            author=ACTOR, committer=ACTOR,
        )

    def branch(self, name: str, commit: git.Commit) -> None:
        self.repo.create_head(name, commit)

    def tag(self, name: str, target, message: str | None = None) -> None:
        if message is None:
            self.repo.create_tag(name, ref=target)
        else:
            self.repo.create_tag(name, ref=target, message=message)

    def write_config(self, text: str) -> None:
        (self.path / "site.toml").write_text(text, encoding="utf-8")


@pytest.fixture
def git_root(tmp_path: Path) -> Path:
    root = tmp_path / "git"
    root.mkdir()
    return root


@pytest.fixture
def make_repo(git_root: Path):
    builders: list[RepoBuilder] = []

    def _make(name: str = "project", config: str | None = None) -> RepoBuilder:
        builder = RepoBuilder(git_root / name)
        if config is not None:
            builder.write_config(config)
        builders.append(builder)
        return builder

    yield _make
    for builder in builders:
        builder.close()


SAMPLE_LAYOUT = {
    "README.md": b"# Sample\n\nSome *text*.\n",
    "b.txt": b"bee\n",
    "A": {"inner.txt": b"inner\n"},
    "a.txt": b"ay\n",
    "run.sh": (EXECUTABLE_MODE, b"#!/bin/sh\necho hi\n"),
    "link": (0o120000, b"a.txt"),
    "vendored": (0o160000, b"\x12" * 20),
    "image.bin": b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR",
}

SAMPLE_CONFIG = """\
[repo]
default_branch = "main"
description = "A sample repository"
readme = "/README.md"

[lang_override]
shell = "*.sh"
"""


@pytest.fixture
def sample_repo(make_repo):
    builder = make_repo("sample", SAMPLE_CONFIG)
    commit = builder.commit(SAMPLE_LAYOUT, "initial")
    builder.branch("main", commit)
    return builder, commit
