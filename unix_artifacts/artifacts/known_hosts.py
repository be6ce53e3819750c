import logging
import re
from pathlib import PurePosixPath
from typing import List

from ..models import KnownHost
from ..sources import read_optional_source
from ..vfs import PathLike, VirtualFileSystem

logger = logging.getLogger(__name__)

KNOWN_HOSTS_FILE = ".ssh/known_hosts"

KNOWN_HOSTS_COMPONENTS = re.compile(r"^(?:(@\S+)\s+)?(\S+)\s+(\S+)\s+(\S+)\s*(.*)$")


def parse_known_hosts(text: str, source: str = KNOWN_HOSTS_FILE) -> List[KnownHost]:
    hosts: List[KnownHost] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        captures = KNOWN_HOSTS_COMPONENTS.match(line)
        if not captures:
            logger.debug(f"Unrecognised known_hosts line {source}:{line_number}")
            continue
        hosts.append(
            KnownHost(
                marker=captures.group(1) or "",
                hostnames=captures.group(2),
                key_type=captures.group(3),
                public_key=captures.group(4),
                comment=captures.group(5).strip(),
            )
        )
    return hosts


def get_known_hosts(vfs: VirtualFileSystem, user_home_path: PathLike) -> List[KnownHost]:
    path = PurePosixPath(str(user_home_path)) / KNOWN_HOSTS_FILE
    contents = read_optional_source(vfs, path)
    if contents is None:
        return []
    return parse_known_hosts(contents, str(path))
