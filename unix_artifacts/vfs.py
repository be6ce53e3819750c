"""
Storage backends used by every artifact reader.

A backend addresses files by path and exposes whole-file, ranged, metadata and
directory reads. Errors are the plain ``OSError`` subclasses raised by the
underlying storage; callers decide which of them are fatal.
"""
import logging
import os
import stat
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path, PurePath
from typing import List, Optional, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, PurePath]


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    LINK = "link"


@dataclass(frozen=True)
class VDirEntry:
    name: str
    kind: EntryKind

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


@dataclass(frozen=True)
class VMetadata:
    file_type: EntryKind
    size: int
    created: Optional[datetime]
    accessed: Optional[datetime]
    modified: Optional[datetime]


class VirtualFileSystem(ABC):
    """Path-addressable read-only storage."""

    def root(self) -> str:
        """Host location standing in for ``/``."""
        return "/"

    @abstractmethod
    def read_to_string(self, path: PathLike) -> str:
        ...

    @abstractmethod
    def read_all(self, path: PathLike) -> bytes:
        ...

    @abstractmethod
    def read(self, path: PathLike, pos: int, size: int) -> bytes:
        ...

    @abstractmethod
    def metadata(self, path: PathLike) -> VMetadata:
        ...

    @abstractmethod
    def read_dir(self, path: PathLike) -> List[VDirEntry]:
        ...

    @abstractmethod
    def is_live(self) -> bool:
        ...

    @abstractmethod
    def clone(self) -> "VirtualFileSystem":
        ...


def _ts(value: Optional[float]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


def _kind_from_mode(mode: int) -> EntryKind:
    if stat.S_ISLNK(mode):
        return EntryKind.LINK
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    return EntryKind.FILE


class StdVirtualFS(VirtualFileSystem):
    """Reads straight from the host filesystem."""

    def read_to_string(self, path: PathLike) -> str:
        # Evidence may be partially corrupted; undecodable bytes are dropped
        return Path(path).read_text(encoding="utf-8", errors="ignore")

    def read_all(self, path: PathLike) -> bytes:
        return Path(path).read_bytes()

    def read(self, path: PathLike, pos: int, size: int) -> bytes:
        with open(path, "rb") as f:
            f.seek(pos)
            return f.read(size)

    def metadata(self, path: PathLike) -> VMetadata:
        st = os.lstat(path)
        return VMetadata(
            file_type=_kind_from_mode(st.st_mode),
            size=st.st_size,
            created=_ts(getattr(st, "st_birthtime", None)),
            accessed=_ts(st.st_atime),
            modified=_ts(st.st_mtime),
        )

    def read_dir(self, path: PathLike) -> List[VDirEntry]:
        entries = []
        with os.scandir(path) as it:
            for entry in it:
                if entry.is_symlink():
                    kind = EntryKind.LINK
                elif entry.is_dir(follow_symlinks=False):
                    kind = EntryKind.DIRECTORY
                else:
                    kind = EntryKind.FILE
                entries.append(VDirEntry(entry.name, kind))
        # scandir order is filesystem dependent
        entries.sort(key=lambda e: e.name)
        return entries

    def is_live(self) -> bool:
        return True

    def clone(self) -> "StdVirtualFS":
        return StdVirtualFS()
