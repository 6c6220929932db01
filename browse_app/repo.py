import logging
from dataclasses import dataclass

import git

from .errors import InternalFailure
from .store import READ_ERRORS, TREE_MODE, ObjectStore, is_hexsha

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeObject:
    tree: git.Tree


@dataclass(frozen=True)
class BlobObject:
    blob: git.Blob
    name: str


Object = TreeObject | BlobObject


@dataclass(frozen=True)
class Branch:
    name: str


class GitRepo:
    """Resolves refs and paths inside one bare repository.

    A ``GitRepo`` is opened for a single request and closed afterwards;
    it never writes to the object store.
    """

    def __init__(self, store: ObjectStore):
        self.store = store

    @classmethod
    def open(cls, path):
        return cls(ObjectStore.open(path))

    def close(self):
        self.store.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def find_subtree_object_by_path(self, ref: str, segments=()) -> Object | None:
        """Find the tree or blob at ``segments`` below the root tree of ``ref``.

        ``segments`` must already be validated; ``..`` gets no special
        treatment and is looked up as an ordinary entry name.
        """
        tree = self.find_ref_root_tree(ref)
        if tree is None:
            return None

        segments = tuple(segments)
        if not segments:
            return TreeObject(tree)

        for depth, segment in enumerate(segments):
            entry = self._find_entry(tree, segment)
            if entry is None:
                return None
            binsha, mode, name = entry
            is_last = depth == len(segments) - 1

            if mode == TREE_MODE:
                tree = self.store.child_tree(tree, binsha, mode, name)
                if is_last:
                    return TreeObject(tree)
            elif is_last and mode >> 12 == 0o10:
                return BlobObject(self.store.child_blob(tree, binsha, mode, name), name)
            else:
                # symlinks, submodules, or a blob in the middle of the path
                return None
        return None

    def _find_entry(self, tree: git.Tree, name: str):
        for entry in self.store.tree_entries(tree):
            if entry[2] == name:
                return entry
        return None

    def find_ref_root_tree(self, ref: str) -> git.Tree | None:
        tree = self._branch_tree(ref)
        if tree is None:
            tree = self._tag_tree(ref)
        if tree is None:
            tree = self._commit_tree(ref)
        if tree is None:
            return None
        return self.store.root_tree(tree)

    def _branch_tree(self, ref: str):
        head = self.store.find_branch(ref)
        if head is None:
            return None
        try:
            return head.commit.tree
        except READ_ERRORS as exc:
            raise InternalFailure(f"finding tree for branch {ref!r}") from exc

    def _tag_tree(self, ref: str):
        # TODO: index tag names per repository instead of scanning every tag on each lookup
        for tag in self.store.iter_tags():
            if tag.name != ref:
                continue
            try:
                return self._peel_to_tree(tag.object)
            except READ_ERRORS as exc:
                raise InternalFailure(f"finding tree for tag {ref!r} ({tag.path})") from exc
        return None

    def _peel_to_tree(self, obj):
        while obj.type == "tag":
            obj = obj.object
        if obj.type == "commit":
            return obj.tree
        if obj.type == "tree":
            return obj
        logger.debug("tag points at a %s, not a tree", obj.type)
        return None

    def _commit_tree(self, ref: str):
        # anything that is not a full object id is treated as an unknown name
        if not is_hexsha(ref):
            return None
        obj = self.store.find_object(ref)
        if obj is None or obj.type != "commit":
            return None
        try:
            return obj.tree
        except READ_ERRORS as exc:
            raise InternalFailure(f"finding tree from commit {ref!r}") from exc

    def read_blob(self, obj: BlobObject) -> bytes:
        return self.store.read_blob(obj.blob)

    def branches(self) -> list[Branch]:
        return [Branch(name) for name in self.store.branches()]
