"""Walk pattern normalization and deterministic file enumeration."""

from __future__ import annotations

import fnmatch
import glob
import os
import time
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from sniffers.index.errors import FilesystemError, GlobError
from sniffers.index.hashing import DEFAULT_CHUNK_BYTES, digest_file
from sniffers.index.models import FingerprintRecord

CURRENT_DIR = "."
RECURSIVE_SUFFIX = "/**/*"
_SEPARATORS = tuple(sorted({"/", os.sep}))


@dataclass(slots=True, frozen=True)
class DiscoveryScanResult:
    """Fingerprinted files in walk order plus scan counters."""

    records: tuple[FingerprintRecord, ...]
    total_matches: int
    skipped_non_files: int
    excluded_internal: int
    hash_seconds: float


def normalize_pattern(value: str) -> str:
    """Turn a user-supplied walk root into a recursive glob pattern."""
    if value.endswith(_SEPARATORS) or value == CURRENT_DIR:
        return f"{value.rstrip(''.join(_SEPARATORS))}{RECURSIVE_SUFFIX}"
    if glob.has_magic(value):
        return value
    return f"{value}{RECURSIVE_SUFFIX}"


def resolve_walk_pattern(value: str) -> str:
    """Normalize a walk root, matching a single existing file directly."""
    if value and not glob.has_magic(value) and not value.endswith(_SEPARATORS):
        if Path(value).is_file():
            return glob.escape(value)
    return normalize_pattern(value)


def validate_pattern(pattern: str) -> None:
    """Reject empty patterns and recursive wildcards embedded in a component."""
    if not pattern:
        raise GlobError("Walk pattern is empty.", hint="Pass a directory such as '.'.")
    for component in pattern.replace(os.sep, "/").split("/"):
        if "**" in component and component != "**":
            raise GlobError(
                f"Invalid walk pattern {pattern!r}: recursive wildcards must form "
                "a single path component.",
                hint="Use '**' on its own between separators, e.g. 'src/**/*.py'.",
            )


def split_pattern(pattern: str) -> tuple[str, tuple[str, ...]]:
    """Split a pattern into its literal base directory and the wildcard components."""
    normalized = pattern.replace(os.sep, "/")
    parts = [part for part in normalized.split("/") if part]
    literal: list[str] = []
    for part in parts:
        if glob.has_magic(part):
            break
        literal.append(part)
    base = "/".join(literal)
    if normalized.startswith("/"):
        base = f"/{base}"
    return base or CURRENT_DIR, tuple(parts[len(literal) :])


def match_parts(pattern_parts: tuple[str, ...], path_parts: tuple[str, ...]) -> bool:
    """Match relative path components against pattern components; '**' spans any depth."""
    if not pattern_parts:
        return not path_parts
    head = pattern_parts[0]
    if head == "**":
        return any(
            match_parts(pattern_parts[1:], path_parts[start:])
            for start in range(len(path_parts) + 1)
        )
    if not path_parts or not fnmatch.fnmatchcase(path_parts[0], head):
        return False
    return match_parts(pattern_parts[1:], path_parts[1:])


def _may_contain_matches(pattern_parts: tuple[str, ...], dir_parts: tuple[str, ...]) -> bool:
    """Return True when entries below a directory could still match the pattern."""
    if not pattern_parts:
        return False
    head = pattern_parts[0]
    if head == "**" or not dir_parts:
        return True
    if not fnmatch.fnmatchcase(dir_parts[0], head):
        return False
    return _may_contain_matches(pattern_parts[1:], dir_parts[1:])


def iter_matches(pattern: str) -> list[Path]:
    """Return every path matching the pattern, sorted for a stable walk order.

    Any directory the walk needs but cannot list raises ``GlobError``; nothing
    is skipped silently. Symlinked directories are matched but not descended.
    """
    validate_pattern(pattern)
    base, pattern_parts = split_pattern(pattern)
    if not pattern_parts:
        return [Path(base)] if os.path.lexists(base) else []
    if not os.path.isdir(base):
        return []

    matches: list[str] = []
    stack: list[tuple[str, tuple[str, ...]]] = [(base, ())]
    while stack:
        current, relative = stack.pop()
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError as exc:
            raise GlobError(
                f"Could not read directory while walking {pattern!r}: {current} "
                f"({exc.strerror or exc})"
            ) from exc
        for entry in ordered_entries:
            parts = (*relative, entry.name)
            if match_parts(pattern_parts, parts):
                matches.append(entry.path)
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError as exc:
                raise GlobError(f"Could not stat path while walking: {entry.path} ({exc})") from exc
            if is_dir and _may_contain_matches(pattern_parts, parts):
                stack.append((entry.path, parts))
    return [Path(match) for match in sorted(matches)]


def canonical_path(path: Path) -> str:
    """Resolve a matched file to its absolute, symlink-free path string."""
    try:
        return str(path.resolve(strict=True))
    except (OSError, RuntimeError) as exc:
        raise FilesystemError(f"Could not resolve path: {path} ({exc})") from exc


def discover_files(
    pattern: str,
    exclude_paths: Iterable[str] = (),
    chunk_bytes: int = DEFAULT_CHUNK_BYTES,
) -> DiscoveryScanResult:
    """Fingerprint every regular file matching the pattern, in walk order."""
    excluded = set(exclude_paths)
    records: list[FingerprintRecord] = []
    skipped_non_files = 0
    excluded_internal = 0
    hash_seconds = 0.0

    matches = iter_matches(pattern)
    for match in matches:
        try:
            is_file = match.is_file()
        except OSError as exc:
            raise FilesystemError(f"Could not stat path: {match} ({exc})") from exc
        if not is_file:
            skipped_non_files += 1
            continue
        absolute_path = canonical_path(match)
        if absolute_path in excluded:
            excluded_internal += 1
            continue
        hash_started = time.perf_counter()
        digest = digest_file(Path(absolute_path), chunk_bytes=chunk_bytes)
        hash_seconds += time.perf_counter() - hash_started
        records.append(FingerprintRecord(path=absolute_path, digest=digest))

    return DiscoveryScanResult(
        records=tuple(records),
        total_matches=len(matches),
        skipped_non_files=skipped_non_files,
        excluded_internal=excluded_internal,
        hash_seconds=hash_seconds,
    )
