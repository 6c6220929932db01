import logging
from dataclasses import dataclass

from markdown_it import MarkdownIt
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from .config import find_language
from .errors import InternalFailure
from .helpers import decode_lossy, format_hexdump
from .repo import BlobObject
from .store import is_binary

logger = logging.getLogger(__name__)

HEXDUMP_LANGUAGE = "hexdump"


@dataclass(frozen=True)
class RenderedContent:
    name: str
    text: str
    language_tag: str | None

    def as_dict(self):
        return {"name": self.name, "contents": self.text, "lang": self.language_tag}


@dataclass(frozen=True)
class ReadmeResult:
    content: str
    is_html: bool

    def as_dict(self):
        return {"content": self.content, "is_html": self.is_html}


def render_blob(data: bytes, name: str, overrides=()) -> RenderedContent:
    if is_binary(data):
        return RenderedContent(name, format_hexdump(data), HEXDUMP_LANGUAGE)
    return RenderedContent(name, decode_lossy(data), find_language(overrides, name))


def markdown_parser() -> MarkdownIt:
    return (
        MarkdownIt("commonmark", {"typographer": True})
        .enable(["table", "strikethrough", "replacements", "smartquotes"])
        .use(footnote_plugin)
        .use(tasklists_plugin)
    )


def render_markdown(text: str) -> str:
    # a fresh parser per call keeps footnote numbering from leaking between documents
    return markdown_parser().render(text)


def render_readme(git_repo, ref: str, files, metadata) -> ReadmeResult | None:
    path = metadata.readme_path
    if path is None:
        return None
    file = next((file for file in files if file.path == path), None)
    if file is None:
        return None

    try:
        obj = git_repo.find_subtree_object_by_path(ref, path.split("/"))
        if not isinstance(obj, BlobObject):
            logger.warning("readme file %r in repo %r is not a file", path, str(metadata.path))
            return None
        data = git_repo.read_blob(obj)
    except InternalFailure:
        logger.warning("finding readme %r in repo %r", path, str(metadata.path), exc_info=True)
        return None

    if is_binary(data):
        logger.warning("readme file %r is present but is binary", path)
        return None

    text = decode_lossy(data)
    if file.name.endswith(".md"):
        return ReadmeResult(content=render_markdown(text), is_html=True)
    return ReadmeResult(content=text, is_html=False)
