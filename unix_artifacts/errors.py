from typing import Optional


class UnixArtifactsError(Exception):
    """Base error for artifact extraction."""


class StorageUnavailable(UnixArtifactsError):
    """A mandatory source (identity or group file) could not be read."""

    def __init__(self, source: str, reason: Optional[str] = None):
        self.source = source
        self.reason = reason
        message = f"Mandatory source unavailable: {source}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class MalformedRecord(UnixArtifactsError):
    """A record does not have the expected shape (field count, numeric field)."""

    def __init__(self, source: str, line_number: int, line: str, reason: str = "bad format"):
        self.source = source
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"Malformed record in {source} line {line_number}: {reason}: {line!r}")
