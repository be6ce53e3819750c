from pathlib import Path, PurePosixPath
from typing import List

from .vfs import PathLike, VDirEntry, VirtualFileSystem, VMetadata


def strip_prefix(path: PathLike) -> PurePosixPath:
    """Turn an image-absolute path into one relative to the image root.

    Leading separators are dropped and ``..`` is folded lexically, clamped at
    the root the way ``/..`` is ``/`` on a real system. Symlinks are not
    resolved.
    """
    parts: List[str] = []
    for part in PurePosixPath(str(path)).parts:
        if part.strip("/") == "" or part == ".":
            continue
        if part == "..":
            if parts:
                parts.pop()
            continue
        parts.append(part)
    return PurePosixPath(*parts)


class ChRootFileSystem(VirtualFileSystem):
    """Confines every request to an evidence directory standing in for ``/``.

    This is a path-rewrite sandbox, not a jail: a symlink inside the evidence
    that points outside of it is still followed by the wrapped backend.
    """

    def __init__(self, path: PathLike, fs: VirtualFileSystem):
        self.path = Path(path)
        self.fs = fs

    def root(self) -> str:
        return str(self.path)

    def resolve(self, path: PathLike) -> Path:
        return self.path.joinpath(strip_prefix(path))

    def read_to_string(self, path: PathLike) -> str:
        return self.fs.read_to_string(self.resolve(path))

    def read_all(self, path: PathLike) -> bytes:
        return self.fs.read_all(self.resolve(path))

    def read(self, path: PathLike, pos: int, size: int) -> bytes:
        return self.fs.read(self.resolve(path), pos, size)

    def metadata(self, path: PathLike) -> VMetadata:
        return self.fs.metadata(self.resolve(path))

    def read_dir(self, path: PathLike) -> List[VDirEntry]:
        return self.fs.read_dir(self.resolve(path))

    def is_live(self) -> bool:
        return False

    def clone(self) -> "ChRootFileSystem":
        return ChRootFileSystem(self.path, self.fs.clone())

    def __repr__(self) -> str:
        return f"ChRootFileSystem({str(self.path)!r})"
