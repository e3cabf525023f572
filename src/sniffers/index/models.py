"""Typed models for fingerprint state."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class FingerprintRecord:
    """One store line: canonical file path and its content digest."""

    path: str
    digest: str


@dataclass(slots=True, frozen=True)
class WalkProfile:
    """Deterministic diagnostics for one index or sniff pass."""

    total_matches: int
    skipped_non_files: int
    excluded_internal: int
    hashed_files: int
    changed_files: int
    hash_seconds: float
    total_seconds: float
