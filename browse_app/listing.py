import logging
from dataclasses import dataclass
from enum import Enum

from .store import EXECUTABLE_MODE, FILE_MODE, TREE_MODE

logger = logging.getLogger(__name__)


class FileMode(Enum):
    FILE = "file"
    EXECUTABLE = "exe"
    DIRECTORY = "dir"

    @classmethod
    def from_mode(cls, mode: int):
        if mode == FILE_MODE:
            return cls.FILE
        if mode == EXECUTABLE_MODE:
            return cls.EXECUTABLE
        if mode == TREE_MODE:
            return cls.DIRECTORY
        logger.warning("unknown file mode %#o", mode)
        return None


@dataclass(frozen=True)
class FileEntry:
    name: str
    path: str
    mode: FileMode
    href: str | None = None

    def as_dict(self):
        return {"name": self.name, "path": self.path, "mode": self.mode.value, "href": self.href}


def join_path(segments, name: str) -> str:
    return "/".join((*segments, name))


def sort_files(files):
    """Sort by lower-cased name, then move directories in front.

    Both passes are stable, so names stay alphabetical inside each group.
    """
    files = sorted(files, key=lambda file: file.name.lower())
    files.sort(key=lambda file: file.mode is not FileMode.DIRECTORY)
    return files


def list_files(git_repo, tree, segments=(), href_for=None) -> list[FileEntry]:
    files = []
    for _, mode, name in git_repo.store.tree_entries(tree):
        file_mode = FileMode.from_mode(mode)
        if file_mode is None:
            continue
        path = join_path(segments, name)
        href = href_for(path) if href_for is not None else None
        files.append(FileEntry(name=name, path=path, mode=file_mode, href=href))
    return sort_files(files)
