from __future__ import annotations

from pathlib import Path


class DsAppError(Exception):
    """Base application exception."""

    pass


class BadRequest(DsAppError):
    pass


class ScanError(DsAppError):
    """The scan root is missing, not a directory, or cannot be listed. Fatal."""

    def __init__(self, root: Path | str, reason: str) -> None:
        self.root = Path(root)
        self.reason = reason
        super().__init__(f"Cannot scan '{self.root}': {reason}")


class AccessError(DsAppError):
    """
    Metadata for a single file could not be read.

    Recoverable: the scanner skips the file and keeps going.
    """

    def __init__(self, path: Path | str, cause: OSError | None = None) -> None:
        self.path = Path(path)
        self.cause = cause
        detail = cause.strerror if cause is not None and cause.strerror else str(cause)
        super().__init__(f"Cannot read metadata for '{self.path}': {detail}")
