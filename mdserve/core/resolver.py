import logging
from dataclasses import dataclass
from typing import Optional

from .errors import DocumentForbidden, DocumentNotFound, DocumentReadError
from .filesystem import FileHandle, FileInfo, FileSystem

logger = logging.getLogger(__name__)

INDEX_FILE = "index.md"
MARKDOWN_SUFFIX = ".md"


def strip_prefix(path: str, prefix: str) -> str:
    """Remove the mount prefix from a request path, if present."""
    if prefix and path.startswith(prefix):
        return path[len(prefix):]
    return path


def is_markdown_path(path: str) -> bool:
    return path.lower().endswith(MARKDOWN_SUFFIX)


@dataclass
class ResolvedFile:
    """An opened Markdown file ready for parsing. Owns the open handle."""
    path: str
    info: FileInfo
    handle: FileHandle

    def close(self) -> None:
        self.handle.close()

    def __enter__(self) -> "ResolvedFile":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class FileResolver:
    """
    Maps a (prefix-stripped) request path to an opened Markdown file.

    Returns None when the path is a directory without an index file; the
    caller then hands the request to the static-file fallback.
    """

    def __init__(self, fs: FileSystem):
        self.fs = fs

    def _open(self, path: str) -> FileHandle:
        try:
            return self.fs.open(path)
        except FileNotFoundError:
            logger.info(f"Not found: {path!r}")
            raise DocumentNotFound()
        except OSError as e:
            logger.error(f"Failed to open {path!r}: {e}")
            raise DocumentReadError("opening", path, e)

    def _stat(self, path: str, handle: FileHandle) -> FileInfo:
        try:
            return handle.stat()
        except OSError as e:
            handle.close()
            logger.error(f"Failed to stat {path!r}: {e}")
            raise DocumentReadError("stating", path, e)

    def resolve(self, path: str) -> Optional[ResolvedFile]:
        handle = self._open(path)
        info = self._stat(path, handle)

        if info.is_dir:
            handle.close()
            index_path = path.rstrip("/") + "/" + INDEX_FILE
            try:
                handle = self.fs.open(index_path)
            except OSError as e:
                logger.debug(f"No index in {path!r} ({e}), using static fallback")
                return None

            info = self._stat(index_path, handle)
            # At most one substitution: an index.md directory is not searched further.
            if info.is_dir:
                handle.close()
                logger.debug(f"{index_path!r} is a directory, using static fallback")
                return None
            path = index_path

        if not is_markdown_path(path):
            handle.close()
            logger.warning(f"Refusing to render non-markdown file {path!r}")
            raise DocumentForbidden()

        logger.debug(f"Resolved {path!r} ({info.size} bytes)")
        return ResolvedFile(path=path, info=info, handle=handle)
