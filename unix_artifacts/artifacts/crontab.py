import logging
import re
from pathlib import PurePosixPath
from typing import List, Optional

from ..errors import MalformedRecord
from ..models import CrontabSchedule, CrontabTask
from ..sources import list_optional_dir, read_optional_source
from ..vfs import VirtualFileSystem

logger = logging.getLogger(__name__)

SYSTEM_CRONTAB = "/etc/crontab"
CRON_D = "/etc/cron.d"
# Debian layout first, then RHEL
USER_CRONTAB_DIRS = ("/var/spool/cron/crontabs", "/var/spool/cron")

ENV_ASSIGNMENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*\s*=")


def parse_crontab_line(
    line: str,
    line_number: int,
    source: str,
    owner: Optional[str] = None,
) -> Optional[CrontabTask]:
    """Parse one crontab line.

    System crontabs (``owner`` is None) carry a user column after the schedule;
    per-user spool files do not, and every task belongs to ``owner``.
    Returns None for blank, comment and environment lines.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith("#") or ENV_ASSIGNMENT.match(stripped):
        return None

    has_user = owner is None
    if stripped.startswith("@"):
        schedule_fields = 1
    else:
        schedule_fields = 5
    expected = schedule_fields + (1 if has_user else 0) + 1

    fields = stripped.split(None, expected - 1)
    if len(fields) < expected:
        raise MalformedRecord(source, line_number, line, f"expected {expected} crontab fields")

    if schedule_fields == 1:
        schedule = CrontabSchedule(special=fields[0])
    else:
        schedule = CrontabSchedule(
            minute=fields[0],
            hour=fields[1],
            day_of_month=fields[2],
            month=fields[3],
            day_of_week=fields[4],
        )
    username = fields[schedule_fields] if has_user else owner
    return CrontabTask(username=username, command=fields[-1].strip(), schedule=schedule, source=source)


def parse_crontab(text: str, source: str, owner: Optional[str] = None, strict: bool = False) -> List[CrontabTask]:
    tasks: List[CrontabTask] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        try:
            task = parse_crontab_line(line, line_number, source, owner)
        except MalformedRecord as e:
            if strict:
                raise
            logger.warning(f"Skipping {e}")
            continue
        if task is not None:
            tasks.append(task)
    return tasks


def get_system_crontab_files(vfs: VirtualFileSystem) -> List[str]:
    paths = [SYSTEM_CRONTAB]
    for entry in list_optional_dir(vfs, CRON_D):
        if entry.is_file:
            paths.append(str(PurePosixPath(CRON_D) / entry.name))
    return paths


def process_system_crontabs(vfs: VirtualFileSystem, strict: bool = False) -> List[CrontabTask]:
    tasks: List[CrontabTask] = []
    for path in get_system_crontab_files(vfs):
        contents = read_optional_source(vfs, path)
        if contents is None:
            continue
        tasks.extend(parse_crontab(contents, path, strict=strict))
    return tasks


def process_user_crontab(vfs: VirtualFileSystem, username: str, strict: bool = False) -> List[CrontabTask]:
    tasks: List[CrontabTask] = []
    for spool in USER_CRONTAB_DIRS:
        path = str(PurePosixPath(spool) / username)
        contents = read_optional_source(vfs, path)
        if contents is None:
            continue
        tasks.extend(parse_crontab(contents, path, owner=username, strict=strict))
    return tasks


def process_crontab_files(
    vfs: VirtualFileSystem,
    username: str,
    strict: bool = False,
    system_tasks: Optional[List[CrontabTask]] = None,
) -> List[CrontabTask]:
    """Every task that runs as ``username``: system entries naming them plus their spool file."""
    if system_tasks is None:
        system_tasks = process_system_crontabs(vfs, strict=strict)
    own = [task for task in system_tasks if task.username == username]
    return own + process_user_crontab(vfs, username, strict=strict)
