"""Content-hash based file change detection."""

from sniffers.index import (
    CorruptRecordError,
    FilesystemError,
    GlobError,
    Sniffer,
    SnifferError,
    StoreNotFoundError,
)

__version__ = "0.1.0"

__all__ = [
    "CorruptRecordError",
    "FilesystemError",
    "GlobError",
    "Sniffer",
    "SnifferError",
    "StoreNotFoundError",
    "__version__",
]
