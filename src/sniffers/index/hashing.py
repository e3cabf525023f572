"""Chunked SHA-256 content digests."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import BinaryIO

from sniffers.index.errors import FilesystemError

DEFAULT_CHUNK_BYTES = 1024
DIGEST_HEX_LENGTH = 64
_HEX_UPPER = frozenset("0123456789ABCDEF")


def digest_stream(
    stream: BinaryIO,
    chunk_bytes: int = DEFAULT_CHUNK_BYTES,
    source: str = "<stream>",
) -> str:
    """Hash a byte stream in bounded reads and return the uppercase hex digest.

    The result depends only on the bytes read, never on ``chunk_bytes``. A read
    failure raises ``FilesystemError`` and no partial digest is returned.
    """
    if chunk_bytes < 1:
        raise ValueError("chunk_bytes must be a positive integer.")
    digest = hashlib.sha256()
    while True:
        try:
            chunk = stream.read(chunk_bytes)
        except OSError as exc:
            raise FilesystemError(f"Could not read {source} for hashing ({exc})") from exc
        if not chunk:
            break
        digest.update(chunk)
    return digest.hexdigest().upper()


def digest_file(path: Path, chunk_bytes: int = DEFAULT_CHUNK_BYTES) -> str:
    """Compute the uppercase SHA-256 digest of a file's full content."""
    try:
        handle = path.open("rb")
    except OSError as exc:
        raise FilesystemError(f"Could not open file for hashing: {path} ({exc})") from exc
    with handle:
        return digest_stream(handle, chunk_bytes=chunk_bytes, source=str(path))


def is_valid_digest(value: str) -> bool:
    """Return True for a 64-character uppercase hexadecimal digest."""
    return len(value) == DIGEST_HEX_LENGTH and _HEX_UPPER.issuperset(value)
