from .errors import RepoPathError

FORBIDDEN_ENDINGS = (":", ">", "<")


def parse_repo_path(raw: str) -> tuple[str, ...]:
    """Split a URL path into repository path segments.

    Dotfiles are allowed; ``..`` is rejected rather than interpreted, so
    nothing past this point ever has to deal with parent references.
    """
    segments = []
    for segment in raw.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            raise RepoPathError("forbidden segment '..'")
        if segment.startswith("*"):
            raise RepoPathError("segment started with an invalid character '*'")
        if segment.endswith(FORBIDDEN_ENDINGS):
            raise RepoPathError(f"segment ended with an invalid character {segment[-1]!r}")
        segments.append(segment)
    return tuple(segments)
