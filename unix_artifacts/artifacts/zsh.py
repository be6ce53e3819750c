from pathlib import PurePosixPath
from typing import List

from ..history import read_history
from ..merge import merge_files
from ..models import ShellConfig, ShellHistory
from ..vfs import PathLike, VirtualFileSystem

ZSH_SYSTEM_FILES = (
    "/etc/zshenv",
    "/etc/zprofile",
    "/etc/zshrc",
    "/etc/zlogin",
    "/etc/zlogout",
    "/etc/zsh/zlogin",
    "/etc/zsh/zlogout",
    "/etc/zsh/zprofile",
    "/etc/zsh/zshrc",
    "/etc/zsh/zshenv",
)

ZSH_USER_FILES = (
    ".zshenv",
    ".zprofile",
    ".zshrc",
    ".zlogin",
    ".zlogout",
)

ZSH_HISTORY_FILE = ".zsh_history"


def generic_zsh_file_paths() -> List[PurePosixPath]:
    return [PurePosixPath(p) for p in ZSH_SYSTEM_FILES]


def user_zsh_file_paths(user_home_path: PathLike) -> List[PurePosixPath]:
    home = PurePosixPath(str(user_home_path))
    return [home / name for name in ZSH_USER_FILES]


def load_zsh_config(vfs: VirtualFileSystem, user_home_path: PathLike) -> ShellConfig:
    paths = generic_zsh_file_paths() + user_zsh_file_paths(user_home_path)
    return merge_files(vfs, paths)


def load_zsh_history(vfs: VirtualFileSystem, user_home_path: PathLike, strict: bool = False) -> ShellHistory:
    path = PurePosixPath(str(user_home_path)) / ZSH_HISTORY_FILE
    return read_history(vfs, path, strip_commands=True, strict=strict)
