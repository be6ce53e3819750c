import logging
import re
from pathlib import PurePosixPath
from typing import List

from ..models import AuthorizedKey
from ..sources import read_optional_source
from ..vfs import PathLike, VirtualFileSystem

logger = logging.getLogger(__name__)

AUTHORIZED_KEYS_FILE = ".ssh/authorized_keys"

# [options] keytype base64 [comment]; options end at the first key type token
KEY_TYPE = r"(?:ssh|ecdsa|sk)-\S+"
AUTHORIZED_KEYS_COMPONENTS = re.compile(r"^(?:(.+?)\s+)?(" + KEY_TYPE + r")\s+(\S+)\s*(.*)$")


def parse_authorized_keys(text: str, source: str = AUTHORIZED_KEYS_FILE) -> List[AuthorizedKey]:
    keys: List[AuthorizedKey] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        captures = AUTHORIZED_KEYS_COMPONENTS.match(line)
        if not captures:
            logger.debug(f"Unrecognised key line {source}:{line_number}")
            continue
        keys.append(
            AuthorizedKey(
                options=captures.group(1) or "",
                key_type=captures.group(2),
                public_key=captures.group(3),
                comment=captures.group(4).strip(),
            )
        )
    return keys


def get_authorized_keys(vfs: VirtualFileSystem, user_home_path: PathLike) -> List[AuthorizedKey]:
    path = PurePosixPath(str(user_home_path)) / AUTHORIZED_KEYS_FILE
    contents = read_optional_source(vfs, path)
    if contents is None:
        return []
    return parse_authorized_keys(contents, str(path))
