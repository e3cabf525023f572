"""Fingerprinting, store and snapshot engine package."""

from .discovery import (
    RECURSIVE_SUFFIX,
    DiscoveryScanResult,
    discover_files,
    normalize_pattern,
    resolve_walk_pattern,
    validate_pattern,
)
from .engine import Sniffer, StoreStatus
from .errors import (
    CorruptRecordError,
    FilesystemError,
    GlobError,
    SnifferError,
    StoreNotFoundError,
)
from .hashing import DEFAULT_CHUNK_BYTES, digest_file, digest_stream
from .models import FingerprintRecord, WalkProfile
from .store import DELIMITER, HASH_STORE_FILE, FingerprintStore

__all__ = [
    "CorruptRecordError",
    "DEFAULT_CHUNK_BYTES",
    "DELIMITER",
    "DiscoveryScanResult",
    "FilesystemError",
    "FingerprintRecord",
    "FingerprintStore",
    "GlobError",
    "HASH_STORE_FILE",
    "RECURSIVE_SUFFIX",
    "Sniffer",
    "SnifferError",
    "StoreNotFoundError",
    "StoreStatus",
    "WalkProfile",
    "digest_file",
    "digest_stream",
    "discover_files",
    "normalize_pattern",
    "resolve_walk_pattern",
    "validate_pattern",
]
