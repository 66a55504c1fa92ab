import threading
import logging
from typing import BinaryIO, Callable, Optional, Tuple

from markupsafe import Markup
from werkzeug.datastructures import Headers

from .filesystem import FileInfo
from .frontmatter import derive_title, parse_front_matter
from .renderer import render_markdown

logger = logging.getLogger(__name__)

RenderFunc = Callable[[bytes], Tuple[str, str]]


class MarkdownFile:
    """
    One Markdown document resolved for a single request: its path, file
    metadata, front matter and raw content. The rendered (toc, body) pair is
    computed on first access, exactly once, and kept for the lifetime of the
    instance.
    """

    def __init__(self, path: str, file_info: FileInfo, content: bytes = b"",
                 metadata: Optional[Headers] = None, title: Optional[str] = None,
                 render: RenderFunc = render_markdown):
        self.path = path
        self.file_info = file_info
        self.content = content
        self.metadata = metadata if metadata is not None else Headers()
        self.title = title or derive_title(file_info.name, self.metadata)
        self._render = render
        self._rendered: Optional[Tuple[str, str]] = None
        self._render_lock = threading.Lock()

    @classmethod
    def load(cls, path: str, file_info: FileInfo, stream: BinaryIO,
             render: RenderFunc = render_markdown) -> "MarkdownFile":
        """
        Build a document from an open stream, splitting off the front matter.
        OSError from the stream propagates to the caller.
        """
        metadata, content = parse_front_matter(stream)
        return cls(path, file_info, content=content, metadata=metadata, render=render)

    def __repr__(self) -> str:
        return f"<MarkdownFile {self.path!r} title={self.title!r}>"

    def get_attr(self, name: str) -> str:
        """
        Return a front matter attribute ("Created", "Title", ...), matched
        case-insensitively, or an empty string.
        """
        return self.metadata.get(name, "")

    @property
    def rendered(self) -> bool:
        return self._rendered is not None

    def html(self) -> Tuple[str, str]:
        """Return (toc, body), rendering the content on the first call."""
        rendered = self._rendered
        if rendered is not None:
            return rendered

        with self._render_lock:
            if self._rendered is None:
                logger.debug(f"Rendering {self.path!r}")
                self._rendered = self._render(self.content)
            return self._rendered

    @property
    def body(self) -> Markup:
        return Markup(self.html()[1])

    @property
    def toc(self) -> Markup:
        return Markup(self.html()[0])
