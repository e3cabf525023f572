"""Line-delimited fingerprint store with atomic full rewrites."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

from sniffers.index.errors import CorruptRecordError, FilesystemError, StoreNotFoundError
from sniffers.index.hashing import is_valid_digest
from sniffers.index.models import FingerprintRecord

HASH_STORE_FILE = ".sniffers"
DELIMITER = "\t"
TEMP_SUFFIX = ".tmp"

# Undecodable filename bytes travel as lone surrogates and are written back unchanged.
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def format_record(path: str, digest: str) -> str:
    """Render one store line, rejecting paths that would make it ambiguous."""
    if DELIMITER in path or "\n" in path or "\r" in path:
        raise FilesystemError(
            f"Cannot record path {path!r}: file names containing a TAB or a newline "
            "are not supported by the hash store format."
        )
    return f"{path}{DELIMITER}{digest}\n"


def parse_record(line: str, line_number: int | None = None) -> FingerprintRecord:
    """Split a store line into path and digest."""
    if line.count(DELIMITER) != 1:
        raise CorruptRecordError(line, line_number)
    path, digest = line.rsplit(DELIMITER, 1)
    if not path or not is_valid_digest(digest):
        raise CorruptRecordError(line, line_number)
    return FingerprintRecord(path=path, digest=digest)


class FingerprintStore:
    """Durable mapping from absolute file path to content digest."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        """Return on-disk store path."""
        return self._path

    @property
    def temp_path(self) -> Path:
        """Return the sibling file a rewrite goes through before replacing the store."""
        return self._path.with_name(self._path.name + TEMP_SUFFIX)

    def exists(self) -> bool:
        """Return True when a store has been written."""
        return self._path.is_file()

    def create(self) -> None:
        """Truncate or create an empty store."""
        self.persist({})

    def load(self) -> dict[str, str]:
        """Read every record; later lines for a path win."""
        mapping: dict[str, str] = {}
        try:
            handle = self._path.open("r", encoding=_ENCODING, errors=_ERRORS, newline="\n")
        except FileNotFoundError as exc:
            raise StoreNotFoundError(str(self._path)) from exc
        except OSError as exc:
            raise FilesystemError(
                f"Could not open hash store file: {self._path} ({exc})"
            ) from exc
        with handle:
            try:
                for line_number, raw_line in enumerate(handle, start=1):
                    line = raw_line.rstrip("\n")
                    if not line.strip():
                        continue
                    record = parse_record(line, line_number)
                    mapping[record.path] = record.digest
            except OSError as exc:
                raise FilesystemError(
                    f"Could not read hash store file: {self._path} ({exc})"
                ) from exc
        return mapping

    def persist(self, mapping: Mapping[str, str]) -> None:
        """Rewrite the store from scratch with one line per entry."""
        self.write_records(
            FingerprintRecord(path=path, digest=digest) for path, digest in mapping.items()
        )

    def write_records(self, records: Iterable[FingerprintRecord]) -> None:
        """Write records through a sibling temp file, then replace the store."""
        lines = [format_record(record.path, record.digest) for record in records]
        tmp = self.temp_path
        try:
            with tmp.open("w", encoding=_ENCODING, errors=_ERRORS, newline="\n") as handle:
                handle.writelines(lines)
                handle.flush()
            tmp.replace(self._path)
        except OSError as exc:
            raise FilesystemError(
                f"Could not write the hash store file: {self._path} ({exc})"
            ) from exc
        finally:
            tmp.unlink(missing_ok=True)
