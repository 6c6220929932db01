import fnmatch
import logging
import re
import tomllib
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from .errors import ConfigError

logger = logging.getLogger(__name__)

DESCRIPTOR_NAME = "site.toml"


@dataclass(frozen=True)
class LanguageOverride:
    """Highlight files whose name matches ``pattern`` as ``language``."""

    language: str
    pattern: str
    regex: re.Pattern = field(repr=False, compare=False)

    @classmethod
    def compile(cls, language, pattern):
        if not isinstance(pattern, str) or not pattern:
            raise ValueError(f"expected a non-empty glob pattern, got {pattern!r}")
        check_glob(pattern)
        return cls(language, pattern, re.compile(fnmatch.translate(pattern)))

    def matches(self, name: str) -> bool:
        return self.regex.match(name) is not None


def check_glob(pattern: str) -> None:
    """Reject globs that ``fnmatch`` would silently read as literals.

    A ``[`` class must be closed, and ``**`` must stand alone as a path
    component. Longer runs of ``*`` are never valid.
    """
    i, end = 0, len(pattern)
    while i < end:
        char = pattern[i]
        if char == "*":
            run_end = i
            while run_end < end and pattern[run_end] == "*":
                run_end += 1
            run = run_end - i
            if run > 2:
                raise ValueError("wildcards are either regular `*` or recursive `**`")
            if run == 2 and (
                (i > 0 and pattern[i - 1] != "/") or (run_end < end and pattern[run_end] != "/")
            ):
                raise ValueError("recursive wildcards must form a single path component")
            i = run_end
        elif char == "[":
            # a ']' right after '[' or '[!' is part of the class
            start = i + 1
            if start < end and pattern[start] == "!":
                start += 1
            close = pattern.find("]", start + 1)
            if close == -1:
                raise ValueError("unclosed character class")
            i = close + 1
        else:
            i += 1


@dataclass(frozen=True)
class RepoMetadata:
    name: str
    path: Path
    default_branch: str
    description: str | None = None
    readme_path: str | None = None
    overrides: tuple[LanguageOverride, ...] = ()


def find_language(overrides, file_name: str) -> str | None:
    for override in overrides:
        if override.matches(file_name):
            return override.language
    return None


def normalize_readme_path(readme) -> str | None:
    # absolute and relative paths are both taken relative to the repository root
    segments = [segment for segment in readme.split("/") if segment not in ("", ".")]
    return "/".join(segments) or None


def compile_overrides(table) -> tuple[LanguageOverride, ...]:
    overrides = []
    for language, patterns in table.items():
        if not isinstance(patterns, list):
            patterns = [patterns]
        for pattern in patterns:
            try:
                overrides.append(LanguageOverride.compile(language, pattern))
            except (ValueError, re.error) as exc:
                logger.warning("ignoring invalid language pattern %r for %r: %s", pattern, language, exc)
    return tuple(overrides)


def _optional_str(table, key, config_path):
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"parsing repo config {str(config_path)!r}: repo.{key} must be a string")
    return value


def parse_repo_config(data: dict, repo_path, name: str, config_path=None) -> RepoMetadata:
    config_path = config_path or Path(repo_path) / DESCRIPTOR_NAME

    repo = data.get("repo")
    if not isinstance(repo, dict):
        raise ConfigError(f"parsing repo config {str(config_path)!r}: missing [repo] table")

    default_branch = repo.get("default_branch")
    if not isinstance(default_branch, str):
        raise ConfigError(f"parsing repo config {str(config_path)!r}: repo.default_branch is required")

    description = _optional_str(repo, "description", config_path)
    readme = _optional_str(repo, "readme", config_path)

    lang_override = data.get("lang_override", {})
    if not isinstance(lang_override, dict):
        raise ConfigError(f"parsing repo config {str(config_path)!r}: lang_override must be a table")

    return RepoMetadata(
        name=name,
        path=Path(repo_path),
        default_branch=default_branch,
        description=description,
        readme_path=normalize_readme_path(readme) if readme is not None else None,
        overrides=compile_overrides(lang_override),
    )


@lru_cache(maxsize=256)
def _load_descriptor(repo_path: str, name: str, config_path: str, mtime_ns: int) -> RepoMetadata:
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except OSError as exc:
        raise ConfigError(f"reading repo config {config_path!r}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"parsing repo config {config_path!r}") from exc
    return parse_repo_config(data, repo_path, name, config_path)


def load_repo_config(repo_path, name=None) -> RepoMetadata | None:
    """Load ``site.toml`` from a repository root.

    Returns ``None`` when the descriptor does not exist, meaning the directory
    is not a browsable repository. Loaded configs are cached per file
    modification time, so repeated loads of an unchanged file are free.
    """
    repo_path = Path(repo_path)
    config_path = repo_path / DESCRIPTOR_NAME
    try:
        stat = config_path.stat()
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise ConfigError(f"reading repo config {str(config_path)!r}") from exc
    return _load_descriptor(str(repo_path), name or repo_path.name, str(config_path), stat.st_mtime_ns)
