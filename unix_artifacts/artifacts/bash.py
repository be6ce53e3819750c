from pathlib import PurePosixPath
from typing import List

from ..history import read_history
from ..merge import merge_files
from ..models import ShellConfig, ShellHistory
from ..vfs import PathLike, VirtualFileSystem

BASH_SYSTEM_FILES = (
    "/etc/profile",
    "/etc/bash.bashrc",
)

BASH_USER_FILES = (
    ".bashrc",
    ".bash_profile",
    ".bash_login",
    ".profile",
    ".bash_logout",
)

BASH_HISTORY_FILE = ".bash_history"


def generic_bash_file_paths() -> List[PurePosixPath]:
    return [PurePosixPath(p) for p in BASH_SYSTEM_FILES]


def user_bash_file_paths(user_home_path: PathLike) -> List[PurePosixPath]:
    home = PurePosixPath(str(user_home_path))
    return [home / name for name in BASH_USER_FILES]


def load_bash_config(vfs: VirtualFileSystem, user_home_path: PathLike) -> ShellConfig:
    """System-wide files first, then the user's own."""
    paths = generic_bash_file_paths() + user_bash_file_paths(user_home_path)
    return merge_files(vfs, paths)


def load_bash_history(vfs: VirtualFileSystem, user_home_path: PathLike, strict: bool = False) -> ShellHistory:
    # bash keeps command text verbatim, trailing whitespace included
    path = PurePosixPath(str(user_home_path)) / BASH_HISTORY_FILE
    return read_history(vfs, path, strip_commands=False, strict=strict)
