from dataclasses import dataclass

from django.urls import reverse


def tree_url(repo_name: str, ref: str, segments=()) -> str | None:
    # a ref has to fit in a single URL segment
    if "/" in ref:
        return None
    if not segments:
        return reverse("browse_app:tree_root", args=[repo_name, ref])
    return reverse("browse_app:tree_view", args=[repo_name, ref, "/".join(segments)])


def refs_url(repo_name: str, ref: str, segments=()) -> str | None:
    if "/" in ref:
        return None
    if not segments:
        return reverse("browse_app:refs_root", args=[repo_name, ref])
    return reverse("browse_app:refs_view", args=[repo_name, ref, "/".join(segments)])


@dataclass(frozen=True)
class Segment:
    name: str
    href: str | None


@dataclass(frozen=True)
class Nav:
    segments: tuple[Segment, ...]
    ref: str
    refs_href: str | None

    def as_dict(self):
        return {
            "path": [{"name": segment.name, "href": segment.href} for segment in self.segments],
            "refs": {"current": self.ref, "href": self.refs_href},
        }


def build_nav(repo_name: str, ref: str, segments=()) -> Nav:
    """Breadcrumbs from the repository root (named after the repo) down to ``segments``."""
    segments = tuple(segments)
    crumbs = [Segment(repo_name, tree_url(repo_name, ref))]
    for depth, name in enumerate(segments, start=1):
        crumbs.append(Segment(name, tree_url(repo_name, ref, segments[:depth])))
    return Nav(tuple(crumbs), ref, refs_url(repo_name, ref, segments))
