import logging
import re
from binascii import a2b_hex

import git
from git.exc import BadName, BadObject, GitError, ODBError
from git.objects.fun import tree_entries_from_data

from .errors import InternalFailure

logger = logging.getLogger(__name__)

TREE_MODE = 0o040000
FILE_MODE = 0o100644
EXECUTABLE_MODE = 0o100755
SYMLINK_MODE = 0o120000
SUBMODULE_MODE = 0o160000

# libgit2 only looks at the head of a blob when guessing whether it is binary
BINARY_CHECK_BYTES = 8000

_HEXSHA_RE = re.compile(r"[0-9a-fA-F]{40}")
_NULL_HEXSHA = "0" * 40

_UTF8_BOM = b"\xef\xbb\xbf"
_WIDE_BOMS = (
    b"\x00\x00\xfe\xff",
    b"\xff\xfe\x00\x00",
    b"\xfe\xff",
    b"\xff\xfe",
)
_SPACE_BYTES = frozenset(b" \t\n\v\f\r")
_PRINTABLE_CONTROL_BYTES = frozenset(b"\b\x1b\x0c")

READ_ERRORS = (GitError, ODBError, OSError, ValueError)


def is_binary(data: bytes) -> bool:
    """Guess whether blob content is binary, the way ``git_blob_is_binary`` does."""
    head = data[:BINARY_CHECK_BYTES]
    if head.startswith(_UTF8_BOM):
        head = head[len(_UTF8_BOM):]
    elif head.startswith(_WIDE_BOMS):
        return True

    printable = nonprintable = 0
    for byte in head:
        if (byte > 0x1F and byte != 0x7F) or byte in _PRINTABLE_CONTROL_BYTES:
            printable += 1
        elif byte == 0:
            return True
        elif byte not in _SPACE_BYTES:
            nonprintable += 1
    return (printable >> 7) < nonprintable


def is_hexsha(value: str) -> bool:
    return _HEXSHA_RE.fullmatch(value) is not None


class ObjectStore:
    """Read-only access to one bare repository on disk."""

    def __init__(self, git_repo: git.Repo):
        self.git_repo = git_repo

    @classmethod
    def open(cls, path):
        try:
            git_repo = git.Repo(path)
        except (GitError, OSError) as exc:
            raise InternalFailure(f"reading git repo {str(path)!r}") from exc
        if not git_repo.bare:
            git_repo.close()
            raise InternalFailure(f"git repo {str(path)!r} is not bare")
        return cls(git_repo)

    def close(self):
        self.git_repo.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def find_branch(self, name: str):
        try:
            heads = list(self.git_repo.heads)
        except READ_ERRORS as exc:
            raise InternalFailure(f"finding branch {name!r}") from exc
        for head in heads:
            if head.name == name:
                return head
        return None

    def iter_tags(self):
        try:
            tags = list(self.git_repo.tags)
        except READ_ERRORS as exc:
            raise InternalFailure("iterating tags") from exc
        return iter(tags)

    def branches(self) -> list[str]:
        try:
            return [head.name for head in self.git_repo.heads]
        except READ_ERRORS as exc:
            raise InternalFailure("iterating branches") from exc

    def find_object(self, hexsha: str):
        """Look up an object by its full hex id, ``None`` when the store lacks it."""
        if not is_hexsha(hexsha) or hexsha == _NULL_HEXSHA:
            return None
        try:
            return git.Object.new_from_sha(self.git_repo, a2b_hex(hexsha))
        except (BadName, BadObject, ValueError):
            return None
        except (GitError, ODBError, OSError) as exc:
            raise InternalFailure(f"finding object {hexsha!r}") from exc

    def tree_entries(self, tree: git.Tree) -> list[tuple[bytes, int, str]]:
        try:
            return tree_entries_from_data(tree.data_stream.read())
        except READ_ERRORS as exc:
            raise InternalFailure(f"reading tree {tree.hexsha}") from exc

    def root_tree(self, tree: git.Tree) -> git.Tree:
        # trees reached through tags or ids carry no path of their own
        return git.Tree(self.git_repo, tree.binsha, TREE_MODE, "")

    def child_tree(self, parent: git.Tree, binsha: bytes, mode: int, name: str) -> git.Tree:
        return git.Tree(self.git_repo, binsha, mode, _join(parent.path, name))

    def child_blob(self, parent: git.Tree, binsha: bytes, mode: int, name: str) -> git.Blob:
        return git.Blob(self.git_repo, binsha, mode, _join(parent.path, name))

    def read_blob(self, blob: git.Blob) -> bytes:
        try:
            return blob.data_stream.read()
        except READ_ERRORS as exc:
            raise InternalFailure(f"reading blob {blob.hexsha} ({blob.path!r})") from exc


def _join(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name
