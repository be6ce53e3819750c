from typing import List

from ..errors import MalformedRecord


def split_fields(line: str, sep: str, min_fields: int, source: str, line_number: int) -> List[str]:
    fields = line.split(sep)
    if len(fields) < min_fields:
        raise MalformedRecord(source, line_number, line, f"expected {min_fields} fields, got {len(fields)}")
    return fields


def parse_id(value: str, source: str, line_number: int, line: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise MalformedRecord(source, line_number, line, f"non-numeric id {value!r}")
