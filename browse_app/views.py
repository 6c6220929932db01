import functools
import logging

from django.conf import settings
from django.http import Http404, HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import redirect

from .errors import InternalFailure, RepoPathError
from .index import find_repository, list_repositories
from .listing import list_files
from .nav import build_nav, tree_url
from .paths import parse_repo_path
from .render import render_blob, render_readme
from .repo import BlobObject, GitRepo, TreeObject

logger = logging.getLogger(__name__)


def internal_failure_as_500(view):
    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except InternalFailure:
            logger.exception("%s %s failed", request.method, request.path)
            return JsonResponse({"error": "Internal Server Error"}, status=500)
    return wrapper


def _repo_context(repo):
    return {
        "name": repo.name,
        "description": repo.description,
        "default_branch": repo.default_branch,
        "href": tree_url(repo.name, repo.default_branch),
    }


def _get_repo_or_404(name):
    repo = find_repository(settings.GIT_ROOT, name)
    if repo is None:
        raise Http404(f"Repository '{name}' not found")
    return repo


@internal_failure_as_500
def repo_list(request: HttpRequest) -> HttpResponse:
    repos = list_repositories(settings.GIT_ROOT)
    return JsonResponse({"repos": [_repo_context(repo) for repo in repos]})


@internal_failure_as_500
def repo_overview(request: HttpRequest, name: str) -> HttpResponse:
    repo = _get_repo_or_404(name)
    href = tree_url(repo.name, repo.default_branch)
    if href is None:
        raise Http404(f"Default branch '{repo.default_branch}' cannot be browsed")
    return redirect(href)


@internal_failure_as_500
def tree_view(request: HttpRequest, name: str, ref: str, path: str = "") -> HttpResponse:
    repo = _get_repo_or_404(name)
    try:
        segments = parse_repo_path(path)
    except RepoPathError as exc:
        return JsonResponse({"error": f"bad path format: {exc}"}, status=400)

    with GitRepo.open(repo.path) as git_repo:
        obj = git_repo.find_subtree_object_by_path(ref, segments)
        if obj is None:
            raise Http404(f"Path '{path}' not found at '{ref}'")

        context = {
            "repo": _repo_context(repo),
            "ref": ref,
            "path": "/".join(segments),
            "nav": build_nav(repo.name, ref, segments).as_dict(),
        }
        if isinstance(obj, TreeObject):
            files = list_files(
                git_repo, obj.tree, segments,
                href_for=lambda file_path: tree_url(repo.name, ref, file_path.split("/")),
            )
            readme = render_readme(git_repo, ref, files, repo)
            context.update(
                view="tree",
                files=[file.as_dict() for file in files],
                readme=readme.as_dict() if readme is not None else None,
            )
        elif isinstance(obj, BlobObject):
            content = render_blob(git_repo.read_blob(obj), obj.name, repo.overrides)
            context.update(view="file", blob=content.as_dict())

    return JsonResponse(context)


@internal_failure_as_500
def refs_view(request, name, ref, path=""):
    repo = _get_repo_or_404(name)
    try:
        segments = parse_repo_path(path)
    except RepoPathError as exc:
        return JsonResponse({"error": f"bad path format: {exc}"}, status=400)

    with GitRepo.open(repo.path) as git_repo:
        branches = git_repo.branches()

    return JsonResponse({
        "repo": _repo_context(repo),
        "branches": [
            {"name": branch.name, "href": tree_url(repo.name, branch.name, segments)}
            for branch in branches
        ],
        "nav": build_nav(repo.name, ref, segments).as_dict(),
        "view": "refs",
    })
