import argparse
import logging
import sys

from browse_app.errors import InternalFailure, RepoPathError
from browse_app.index import find_repository, list_repositories
from browse_app.listing import FileMode, list_files
from browse_app.paths import parse_repo_path
from browse_app.render import render_blob, render_readme
from browse_app.repo import BlobObject, GitRepo, TreeObject
from gitsite_core.settings import GIT_ROOT


def repos(root):
    for repo in list_repositories(root):
        description = repo.description or ""
        print(f"{repo.name}\t{repo.default_branch}\t{description}".rstrip())
    return 0


def branches(repo):
    with GitRepo.open(repo.path) as git_repo:
        for branch in git_repo.branches():
            print(branch.name)
    return 0


def ls(repo, ref, segments):
    with GitRepo.open(repo.path) as git_repo:
        obj = git_repo.find_subtree_object_by_path(ref, segments)
        if obj is None:
            print(f"Not found: '{'/'.join(segments)}' at '{ref}'")
            return 1
        if isinstance(obj, BlobObject):
            print(obj.blob.path)
            return 0
        for file in list_files(git_repo, obj.tree, segments):
            suffix = "/" if file.mode is FileMode.DIRECTORY else ""
            print(f"{file.mode.value}\t{file.name}{suffix}")
    return 0


def show(repo, ref, segments):
    with GitRepo.open(repo.path) as git_repo:
        obj = git_repo.find_subtree_object_by_path(ref, segments)
        if not isinstance(obj, BlobObject):
            print(f"No file '{'/'.join(segments)}' at '{ref}'")
            return 1
        content = render_blob(git_repo.read_blob(obj), obj.name, repo.overrides)
    print(content.text)
    return 0


def readme(repo, ref):
    with GitRepo.open(repo.path) as git_repo:
        obj = git_repo.find_subtree_object_by_path(ref)
        if not isinstance(obj, TreeObject):
            print(f"Ref '{ref}' not found")
            return 1
        files = list_files(git_repo, obj.tree)
        result = render_readme(git_repo, ref, files, repo)
    if result is None:
        print("No readme.")
        return 1
    print(result.content)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="git-site command")
    parser.add_argument('command', choices=['repos', 'branches', 'ls', 'show', 'readme'], help='git-site commands')
    parser.add_argument('--root', type=str, default=GIT_ROOT, help='Directory holding the bare repositories')
    parser.add_argument('-r', '--repo', type=str, help='Repository name')
    parser.add_argument('--ref', type=str, help='Branch, tag or commit id (defaults to the default branch)')
    parser.add_argument('-p', '--path', type=str, default='', help='Path inside the repository')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log warnings and debug output')

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.ERROR)

    try:
        if args.command == 'repos':
            return repos(args.root)

        if not args.repo:
            parser.error(f'{args.command} requires a -r repo name')
        repo = find_repository(args.root, args.repo)
        if repo is None:
            print(f"No repository '{args.repo}' in {args.root}")
            return 1
        ref = args.ref or repo.default_branch

        try:
            segments = parse_repo_path(args.path)
        except RepoPathError as exc:
            parser.error(f'bad path format: {exc}')

        if args.command == 'branches':
            return branches(repo)
        elif args.command == 'ls':
            return ls(repo, ref, segments)
        elif args.command == 'show':
            return show(repo, ref, segments)
        else:
            return readme(repo, ref)
    except InternalFailure as exc:
        logging.getLogger(__name__).debug("command failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
