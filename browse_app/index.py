import logging
from pathlib import Path

from .config import load_repo_config
from .errors import InternalFailure

logger = logging.getLogger(__name__)


def find_repository(git_root, name: str):
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        return None
    repo_path = Path(git_root) / name
    if not repo_path.is_dir():
        return None
    return load_repo_config(repo_path, name)


def list_repositories(git_root):
    git_root = Path(git_root)
    try:
        children = sorted(git_root.iterdir())
    except OSError as exc:
        raise InternalFailure(f"reading directory git_root={str(git_root)!r}") from exc

    repos = []
    for child in children:
        if not child.is_dir():
            continue
        try:
            repo = load_repo_config(child, child.name)
        except InternalFailure:
            logger.warning("reading repo %r", str(child), exc_info=True)
            continue
        if repo is not None:
            repos.append(repo)

    repos.sort(key=lambda repo: repo.name.lower())
    return repos
