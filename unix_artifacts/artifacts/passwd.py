import logging
from typing import List, Optional

from ..errors import MalformedRecord
from ..models import UserIdentity
from ..sources import read_mandatory_source
from ..vfs import VirtualFileSystem
from .records import parse_id, split_fields

logger = logging.getLogger(__name__)

PASSWD_PATH = "/etc/passwd"

# name:password:uid:gid:gecos:home:shell
PASSWD_FIELDS = 7


def parse_passwd_line(line: str, line_number: int, source: str = PASSWD_PATH) -> UserIdentity:
    columns = split_fields(line, ":", PASSWD_FIELDS, source, line_number)
    return UserIdentity(
        name=columns[0].strip(),
        user_id=parse_id(columns[2], source, line_number, line),
        home=columns[5].strip(),
        shell=columns[6].strip(),
    )


def parse_passwd(text: str, source: str = PASSWD_PATH, skip_malformed: bool = False) -> List[UserIdentity]:
    users: List[UserIdentity] = []
    seen = set()
    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip() or line.startswith("#"):
            continue
        try:
            user = parse_passwd_line(line, line_number, source)
        except MalformedRecord as e:
            if not skip_malformed:
                raise
            logger.warning(f"Skipping {e}")
            continue
        if user.name in seen:
            logger.warning(f"Duplicate user '{user.name}' in {source} line {line_number}; keeping the first entry")
            continue
        seen.add(user.name)
        users.append(user)
    return users


def read_passwd(
    vfs: VirtualFileSystem,
    skip_malformed: bool = False,
    attempts: Optional[int] = None,
) -> List[UserIdentity]:
    return parse_passwd(read_mandatory_source(vfs, PASSWD_PATH, attempts), skip_malformed=skip_malformed)
