from __future__ import annotations

import json
from pathlib import Path

from sniffers.logging import AuditEvent, JsonlAuditLogger, sanitize_metadata


def _event(timestamp: str, operation: str = "sniff") -> AuditEvent:
    return AuditEvent(
        timestamp=timestamp,
        run_id="run-000001",
        operation=operation,
        ok=True,
        error_code=None,
        metadata={"changed_files": 0},
    )


def test_append_writes_one_sorted_json_object_per_line(tmp_path: Path) -> None:
    logger = JsonlAuditLogger(tmp_path / "logs" / "audit.jsonl")

    logger.append(_event("2026-01-01T00:00:00.000Z", operation="index"))

    lines = logger.path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    assert list(json.loads(lines[0]).keys()) == [
        "error_code",
        "metadata",
        "ok",
        "operation",
        "run_id",
        "timestamp",
    ]


def test_read_filters_by_since_and_limit(tmp_path: Path) -> None:
    logger = JsonlAuditLogger(tmp_path / "audit.jsonl")
    for day in ("01", "02", "03", "04"):
        logger.append(_event(f"2026-01-{day}T00:00:00.000Z"))

    recent = logger.read(since="2026-01-02T00:00:00.000Z", limit=2)

    assert [entry["timestamp"] for entry in recent] == [
        "2026-01-03T00:00:00.000Z",
        "2026-01-04T00:00:00.000Z",
    ]
    assert logger.read(limit=0) == []


def test_read_skips_malformed_lines(tmp_path: Path) -> None:
    path = tmp_path / "audit.jsonl"
    path.write_text('not-json\n[1, 2]\n{"timestamp": "x"}\n', encoding="utf-8")

    assert JsonlAuditLogger(path).read() == [{"timestamp": "x"}]


def test_read_missing_log_returns_empty_list(tmp_path: Path) -> None:
    assert JsonlAuditLogger(tmp_path / "absent.jsonl").read() == []


def test_sanitize_metadata_summarizes_non_scalars() -> None:
    sanitized = sanitize_metadata(
        {
            "path": "src",
            "changed_files": 2,
            "paths": ["/a", "/b"],
            "profile": {"b": 1, "a": 2},
            "root": Path("/tmp"),
        }
    )

    assert sanitized == {
        "changed_files": 2,
        "path": "src",
        "paths_length": 2,
        "paths_type": "list",
        "profile_keys": ["a", "b"],
        "profile_type": "dict",
        "root_type": type(Path("/tmp")).__name__,
    }
