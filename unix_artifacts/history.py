"""
Timestamped shell history.

Two log styles are understood, and may be mixed in one file:

* sentinel: a ``#<epoch>`` line sets the timestamp for the command lines that
  follow it (bash with ``HISTTIMEFORMAT``);
* inline: ``: <epoch>:<elapsed>;<command>`` carries both on one line (zsh
  ``EXTENDED_HISTORY``). It does not touch the pending sentinel timestamp.

Any other line, ``# comments`` typed at the prompt included, is a command.
"""
import logging
import re
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from .errors import MalformedRecord
from .models import HistoryEntry, ShellHistory
from .sources import read_optional_source
from .vfs import PathLike, VirtualFileSystem

logger = logging.getLogger(__name__)

INLINE_HISTORY_REGEX = re.compile(r"^:\s*(\d+):[^;]*;(.*)$")
SENTINEL_REGEX = re.compile(r"^#\s*(-?\d+)\s*$")

EPOCH = datetime(1970, 1, 1)


def from_epoch(seconds: int) -> Optional[datetime]:
    """Naive UTC datetime, or None when out of range."""
    try:
        return EPOCH + timedelta(seconds=seconds)
    except OverflowError:
        return None


class HistoryParser:
    def __init__(self, strip_commands: bool = False, strict: bool = False, source: str = "<history>"):
        self.strip_commands = strip_commands
        self.strict = strict
        self.source = source

    def _timestamp(self, raw: str, line: str, line_number: int) -> Optional[datetime]:
        """Epoch seconds to a datetime; unconvertible digit runs fall back to epoch 0."""
        try:
            seconds = int(raw)
        except ValueError:
            # digit strings past the int conversion limit end up here
            if self.strict:
                raise MalformedRecord(self.source, line_number, line[:80], "bad timestamp")
            logger.warning(f"Bad timestamp in {self.source} line {line_number}; using epoch 0")
            seconds = 0
        return from_epoch(seconds)

    def parse_lines(self, lines: Iterable[str]) -> List[HistoryEntry]:
        entries: List[HistoryEntry] = []
        pending: Optional[datetime] = None
        for line_number, line in enumerate(lines, start=1):
            inline = INLINE_HISTORY_REGEX.match(line)
            sentinel = None if inline else SENTINEL_REGEX.match(line)
            if inline:
                command = inline.group(2)
                if self.strip_commands:
                    command = command.strip()
                timestamp = self._timestamp(inline.group(1), line, line_number)
                entries.append(HistoryEntry(timestamp=timestamp, command=command))
            elif sentinel:
                pending = self._timestamp(sentinel.group(1), line, line_number)
            else:
                command = line.strip() if self.strip_commands else line
                entries.append(HistoryEntry(timestamp=pending, command=command))
        return entries

    def parse(self, text: str) -> List[HistoryEntry]:
        return self.parse_lines(text.splitlines())


def read_history(
    vfs: VirtualFileSystem,
    path: PathLike,
    strip_commands: bool = False,
    strict: bool = False,
) -> ShellHistory:
    contents = read_optional_source(vfs, path)
    if contents is None:
        return ShellHistory(source=str(path))
    parser = HistoryParser(strip_commands=strip_commands, strict=strict, source=str(path))
    commands = parser.parse(contents)
    logger.debug(f"Read {len(commands)} history entries from {path}")
    return ShellHistory(source=str(path), commands=commands)
