"""
Line classification for shell rc files.

A line is tried against an ordered table of patterns (alias, export, bare
variable assignment) and the first match wins. ``export FOO=bar`` is an export
and never reaches the variable pattern.

Values come in three mutually exclusive forms: single-quoted, double-quoted
or unquoted. Quoted values are the content of the first pair of quotes with
no escape handling. An unquoted variable value stops at ``#``; alias and
export values keep the literal remainder. This is a heuristic extractor, not
a shell grammar.
"""
import re
from enum import Enum
from typing import Callable, NamedTuple, Optional, Pattern, Tuple

NAME = r"([A-Za-z_][A-Za-z0-9_]*)"

ALIAS_REGEX = re.compile(r"""^\s*alias\s*""" + NAME + r"""\s*=\s*(?:(?:'(.*?)')|(?:"(.*?)")|(.*))""")
EXPORT_REGEX = re.compile(r"""^\s*export\s*""" + NAME + r"""\s*=\s*(?:(?:'(.*?)')|(?:"(.*?)")|(.*))""")
VARIABLE_REGEX = re.compile(r"""^\s*""" + NAME + r"""\s*=(?:(?:'(.*?)')|(?:"(.*?)")|([^#\n]*))\s*(?:#.*)?""")


class LineKind(str, Enum):
    ALIAS = "alias"
    EXPORT = "export"
    VARIABLE = "variable"


class Classification(NamedTuple):
    kind: LineKind
    key: str
    value: str


def key_and_value(match: "re.Match[str]") -> Tuple[str, str]:
    """Pick the key and whichever of the three value groups participated."""
    key = match.group(1)
    single, double, bare = match.group(2), match.group(3), match.group(4)
    if single is not None:
        value = single
    elif double is not None:
        value = double
    else:
        value = bare or ""
    return key.strip(), value.strip()


Extractor = Callable[["re.Match[str]"], Tuple[str, str]]

# Order is a tie-break: a line may fit more than one shape.
LINE_CLASSIFIERS: Tuple[Tuple[LineKind, Pattern[str], Extractor], ...] = (
    (LineKind.ALIAS, ALIAS_REGEX, key_and_value),
    (LineKind.EXPORT, EXPORT_REGEX, key_and_value),
    (LineKind.VARIABLE, VARIABLE_REGEX, key_and_value),
)


def classify_line(line: str) -> Optional[Classification]:
    for kind, pattern, extract in LINE_CLASSIFIERS:
        match = pattern.match(line)
        if match:
            key, value = extract(match)
            return Classification(kind, key, value)
    return None
