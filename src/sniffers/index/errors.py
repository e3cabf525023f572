"""Error taxonomy for snapshot and store failures."""

from __future__ import annotations


class SnifferError(Exception):
    """Base class for all snapshot engine failures."""

    code = "SNIFFER_ERROR"

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class FilesystemError(SnifferError):
    """Raised when a filesystem open, read, write or resolve step fails."""

    code = "IO_ERROR"


class GlobError(SnifferError):
    """Raised when an enumeration pattern is malformed."""

    code = "GLOB_ERROR"


class StoreNotFoundError(SnifferError):
    """Raised when the fingerprint store has not been created yet."""

    code = "STORE_NOT_FOUND"

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Could not locate the hash store file: {path}",
            hint="Run `sniffers index` first.",
        )
        self.path = path


class CorruptRecordError(SnifferError):
    """Raised when a store line does not parse into exactly path and digest."""

    code = "CORRUPT_RECORD"

    def __init__(self, line: str, line_number: int | None = None) -> None:
        where = f" at line {line_number}" if line_number is not None else ""
        super().__init__(
            f"Unexpected hash store entry{where}: {line!r}",
            hint="Re-run `sniffers index` to rebuild the store.",
        )
        self.line = line
        self.line_number = line_number
