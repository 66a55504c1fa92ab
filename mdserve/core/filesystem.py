import errno
import logging
import os
import posixpath
import stat
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileInfo:
    """Snapshot of a file's metadata taken when it was opened."""
    name: str
    size: int
    mode: int
    mod_time: datetime
    is_dir: bool

    @classmethod
    def from_stat(cls, name: str, st: os.stat_result) -> "FileInfo":
        return cls(
            name=name,
            size=st.st_size,
            mode=st.st_mode,
            mod_time=datetime.fromtimestamp(st.st_mtime),
            is_dir=stat.S_ISDIR(st.st_mode),
        )


class FileHandle:
    """
    An opened entry of a FileSystem.
    `stream` is a seekable binary stream for regular files and None for
    directories. Usable as a context manager; closing twice is harmless.
    """

    def __init__(self, name: str, real_path: Path, stream: Optional[BinaryIO] = None):
        self.name = name
        self.real_path = real_path
        self.stream = stream
        self.closed = False

    def stat(self) -> FileInfo:
        if self.stream is not None:
            st = os.fstat(self.stream.fileno())
        else:
            st = os.stat(self.real_path)
        return FileInfo.from_stat(self.real_path.name or self.name, st)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.stream is not None:
            self.stream.close()

    def __enter__(self) -> "FileHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class FileSystem(ABC):
    """
    Read-only view of a tree of files addressed by slash-separated names.
    """

    @abstractmethod
    def open(self, name: str) -> FileHandle:
        """
        Open `name`. Raises FileNotFoundError when it does not exist and any
        other OSError for every other failure.
        """
        pass

    @abstractmethod
    def listdir(self, name: str) -> List[FileInfo]:
        """Return the entries of directory `name`, sorted by name."""
        pass


class DirFileSystem(FileSystem):
    """
    FileSystem backed by a directory on disk. Names are cleaned so that they
    can never address anything above the root.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).resolve()

    def __repr__(self) -> str:
        return f"DirFileSystem({str(self.root)!r})"

    def real_path(self, name: str) -> Path:
        if "\x00" in name:
            raise FileNotFoundError(errno.ENOENT, "invalid character in file path", name)
        cleaned = posixpath.normpath("/" + name.lstrip("/")).lstrip("/")
        if not cleaned or cleaned == ".":
            return self.root
        return self.root.joinpath(*cleaned.split("/"))

    def open(self, name: str) -> FileHandle:
        real = self.real_path(name)
        try:
            st = os.stat(real)
        except NotADirectoryError as e:
            # "a.md/b" where a.md is a file: report as missing, not as a fault
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), name) from e

        if stat.S_ISDIR(st.st_mode):
            return FileHandle(name, real)
        return FileHandle(name, real, open(real, "rb"))

    def listdir(self, name: str) -> List[FileInfo]:
        real = self.real_path(name)
        entries = []
        with os.scandir(real) as it:
            for entry in it:
                try:
                    entries.append(FileInfo.from_stat(entry.name, entry.stat()))
                except OSError as e:
                    logger.debug(f"Skipping unreadable entry {entry.path}: {e}")
        entries.sort(key=lambda info: info.name)
        return entries
