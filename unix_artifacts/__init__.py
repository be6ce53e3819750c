"""
Forensic extraction of Unix user artifacts from a captured filesystem image.
"""
from .aggregator import ArtifactAggregator, collect_system_snapshot, collect_user_artifact
from .chroot import ChRootFileSystem
from .classify import Classification, LineKind, classify_line
from .errors import MalformedRecord, StorageUnavailable, UnixArtifactsError
from .history import HistoryParser, read_history
from .merge import ConfigMerger, merge_files
from .models import (
    Group,
    HistoryEntry,
    ShellConfig,
    ShellHistory,
    SystemSnapshot,
    UserArtifact,
    UserIdentity,
)
from .vfs import StdVirtualFS, VirtualFileSystem

__all__ = [
    "ArtifactAggregator",
    "collect_system_snapshot",
    "collect_user_artifact",
    "ChRootFileSystem",
    "StdVirtualFS",
    "VirtualFileSystem",
    "Classification",
    "LineKind",
    "classify_line",
    "ConfigMerger",
    "merge_files",
    "HistoryParser",
    "read_history",
    "MalformedRecord",
    "StorageUnavailable",
    "UnixArtifactsError",
    "Group",
    "HistoryEntry",
    "ShellConfig",
    "ShellHistory",
    "SystemSnapshot",
    "UserArtifact",
    "UserIdentity",
]
