"""
Reading policy for the two classes of source file.

Mandatory sources (identity and group files) must be readable: failures are
logged and raised as ``StorageUnavailable`` naming the file. Optional sources
(rc files, history, keys, crontabs, unit files) may legitimately be absent;
any read failure degrades to ``None`` / an empty listing.
"""
import logging
from typing import List, Optional

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from .config import settings
from .errors import StorageUnavailable
from .vfs import PathLike, VDirEntry, VirtualFileSystem

logger = logging.getLogger(__name__)

# Seen on network-mounted evidence; a missing file is never retried.
TRANSIENT_ERRORS = (TimeoutError, InterruptedError, BlockingIOError)


def mandatory_retryer(attempts: int) -> Retrying:
    return Retrying(
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=8),
        reraise=True,
    )


def read_mandatory_source(vfs: VirtualFileSystem, path: PathLike, attempts: Optional[int] = None) -> str:
    """Read ``path`` or raise ``StorageUnavailable``; ``attempts`` defaults to ``READ_RETRY_ATTEMPTS``."""
    if attempts is None:
        attempts = settings.READ_RETRY_ATTEMPTS
    try:
        return mandatory_retryer(attempts)(vfs.read_to_string, path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read mandatory source {path}: {e}")
        raise StorageUnavailable(str(path), str(e)) from e


def read_optional_source(vfs: VirtualFileSystem, path: PathLike) -> Optional[str]:
    try:
        return vfs.read_to_string(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Optional source {path} skipped: {e}")
        return None


def list_optional_dir(vfs: VirtualFileSystem, path: PathLike) -> List[VDirEntry]:
    try:
        return vfs.read_dir(path)
    except OSError as e:
        logger.debug(f"Optional directory {path} skipped: {e}")
        return []
