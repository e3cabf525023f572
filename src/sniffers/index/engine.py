"""Snapshot engine: index a file set, then sniff it for changes."""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from pathlib import Path

from sniffers.index.discovery import (
    CURRENT_DIR,
    DiscoveryScanResult,
    discover_files,
    resolve_walk_pattern,
)
from sniffers.index.errors import FilesystemError
from sniffers.index.hashing import DEFAULT_CHUNK_BYTES
from sniffers.index.models import WalkProfile
from sniffers.index.store import HASH_STORE_FILE, FingerprintStore


@dataclass(slots=True, frozen=True)
class StoreStatus:
    """Current store status snapshot."""

    store_status: str
    store_path: str
    record_count: int


class Sniffer:
    """Detects added or modified files by comparing content digests to a stored snapshot.

    Construction performs no I/O. ``index()`` records a fresh baseline for every
    regular file under the walk root; ``sniff()`` compares a fresh walk with that
    baseline, updates it, and returns the new or modified paths in walk order.
    The store file itself, plus any ``exclude_paths``, is never walked.
    """

    def __init__(
        self,
        path: str | Path = CURRENT_DIR,
        hash_store_file: str | Path = HASH_STORE_FILE,
        *,
        chunk_bytes: int = DEFAULT_CHUNK_BYTES,
        exclude_paths: Iterable[str | Path] = (),
    ) -> None:
        if chunk_bytes < 1:
            raise ValueError("chunk_bytes must be a positive integer.")
        self._path = str(path) or CURRENT_DIR
        self._hash_store_file = Path(hash_store_file)
        self._chunk_bytes = chunk_bytes
        self._exclude_paths = tuple(Path(item) for item in exclude_paths)

    @property
    def path(self) -> str:
        """Return the walk root as supplied."""
        return self._path

    @property
    def hash_store_file(self) -> Path:
        """Return the configured store location."""
        return self._hash_store_file

    def with_path(self, path: str | Path) -> Sniffer:
        """Return a copy walking a different root."""
        return Sniffer(
            path,
            self._hash_store_file,
            chunk_bytes=self._chunk_bytes,
            exclude_paths=self._exclude_paths,
        )

    def with_hash_store_file(self, hash_store_file: str | Path) -> Sniffer:
        """Return a copy backed by a different store file."""
        return Sniffer(
            self._path,
            hash_store_file,
            chunk_bytes=self._chunk_bytes,
            exclude_paths=self._exclude_paths,
        )

    def index(self, profile: dict[str, object] | None = None) -> None:
        """Record a fresh baseline digest for every file under the walk root."""
        started = time.perf_counter()
        store = self._store()
        self._require_store_parent(store)
        scan = self._scan()
        mapping = {record.path: record.digest for record in scan.records}
        store.persist(mapping)
        self._fill_profile(profile, scan, changed_files=0, started=started)

    def sniff(self, profile: dict[str, object] | None = None) -> list[str]:
        """Return paths added or modified since the stored snapshot, updating it."""
        started = time.perf_counter()
        store = self._store()
        mapping = store.load()
        scan = self._scan()

        for internal_path in self._internal_paths():
            mapping.pop(internal_path, None)

        altered_files: list[str] = []
        for record in scan.records:
            if mapping.get(record.path) == record.digest:
                continue
            mapping[record.path] = record.digest
            altered_files.append(record.path)

        store.persist(mapping)
        self._fill_profile(profile, scan, changed_files=len(altered_files), started=started)
        return altered_files

    def status(self) -> StoreStatus:
        """Report whether a baseline exists and how many files it tracks."""
        store = self._store()
        if not store.exists():
            return StoreStatus(
                store_status="not_indexed",
                store_path=str(store.path),
                record_count=0,
            )
        return StoreStatus(
            store_status="ready",
            store_path=str(store.path),
            record_count=len(store.load()),
        )

    def _store(self) -> FingerprintStore:
        return FingerprintStore(self._hash_store_file.resolve())

    def _internal_paths(self) -> tuple[str, ...]:
        store = self._store()
        paths = [store.path, store.temp_path, *(path.resolve() for path in self._exclude_paths)]
        return tuple(str(path) for path in paths)

    def _scan(self) -> DiscoveryScanResult:
        return discover_files(
            resolve_walk_pattern(self._path),
            exclude_paths=self._internal_paths(),
            chunk_bytes=self._chunk_bytes,
        )

    @staticmethod
    def _require_store_parent(store: FingerprintStore) -> None:
        parent = store.path.parent
        if not parent.is_dir():
            raise FilesystemError(
                f"Could not create the hash store file: {store.path} "
                f"(parent directory {parent} does not exist)"
            )

    @staticmethod
    def _fill_profile(
        profile: dict[str, object] | None,
        scan: DiscoveryScanResult,
        changed_files: int,
        started: float,
    ) -> None:
        if profile is None:
            return
        payload = WalkProfile(
            total_matches=scan.total_matches,
            skipped_non_files=scan.skipped_non_files,
            excluded_internal=scan.excluded_internal,
            hashed_files=len(scan.records),
            changed_files=changed_files,
            hash_seconds=scan.hash_seconds,
            total_seconds=time.perf_counter() - started,
        )
        profile.update(asdict(payload))

    def __str__(self) -> str:
        return (
            f"Sniffer {{ path: {self._path!r}, "
            f"hash_store_file: {str(self._hash_store_file)!r} }}"
        )
