import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import MalformedRecord
from ..models import Group
from ..sources import read_mandatory_source
from ..vfs import VirtualFileSystem
from .records import parse_id, split_fields

logger = logging.getLogger(__name__)

GROUP_PATH = "/etc/group"

# name:password:gid:member,member
GROUP_FIELDS = 4


@dataclass
class SystemGroups:
    groups: List[Group] = field(default_factory=list)

    def get_groups_for_user(self, username: str) -> List[Group]:
        return [group for group in self.groups if username in group.users]

    def get(self, name: str) -> Optional[Group]:
        for group in self.groups:
            if group.name == name:
                return group
        return None


def parse_group_line(line: str, line_number: int, source: str = GROUP_PATH) -> Group:
    columns = split_fields(line, ":", GROUP_FIELDS, source, line_number)
    # An empty member field yields [""]; kept as evidence of the raw record
    users = [member.strip() for member in columns[3].split(",")]
    return Group(
        name=columns[0].strip(),
        group_id=parse_id(columns[2], source, line_number, line),
        users=users,
    )


def parse_group_file(text: str, source: str = GROUP_PATH, skip_malformed: bool = False) -> SystemGroups:
    groups: List[Group] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip() or line.startswith("#"):
            continue
        try:
            groups.append(parse_group_line(line, line_number, source))
        except MalformedRecord as e:
            if not skip_malformed:
                raise
            logger.warning(f"Skipping {e}")
    return SystemGroups(groups=groups)


def process_group_file(
    vfs: VirtualFileSystem,
    skip_malformed: bool = False,
    attempts: Optional[int] = None,
) -> SystemGroups:
    return parse_group_file(read_mandatory_source(vfs, GROUP_PATH, attempts), skip_malformed=skip_malformed)
