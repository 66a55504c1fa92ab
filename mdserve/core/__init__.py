from .errors import DocumentForbidden, DocumentNotFound, DocumentReadError
from .filesystem import DirFileSystem, FileHandle, FileInfo, FileSystem
from .document import MarkdownFile
from .renderer import RenderPipeline, render_markdown
from .render_interface import DefaultRenderer, DocumentRenderer
from .handler import MarkdownHandler, MarkdownMiddleware, new_middleware

__all__ = [
    "DocumentForbidden",
    "DocumentNotFound",
    "DocumentReadError",
    "DirFileSystem",
    "FileHandle",
    "FileInfo",
    "FileSystem",
    "MarkdownFile",
    "RenderPipeline",
    "render_markdown",
    "DefaultRenderer",
    "DocumentRenderer",
    "MarkdownHandler",
    "MarkdownMiddleware",
    "new_middleware",
]
