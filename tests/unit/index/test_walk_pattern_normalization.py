from __future__ import annotations

from pathlib import Path

import pytest

from sniffers.index import GlobError, discover_files, normalize_pattern, resolve_walk_pattern
from sniffers.index.discovery import validate_pattern


def test_current_dir_marker_becomes_recursive_pattern() -> None:
    assert normalize_pattern(".") == "./**/*"


def test_trailing_separator_becomes_recursive_pattern() -> None:
    assert normalize_pattern("src/") == "src/**/*"
    assert normalize_pattern("/") == "/**/*"


def test_plain_directory_becomes_recursive_pattern() -> None:
    assert normalize_pattern("src") == "src/**/*"
    assert normalize_pattern("/var/data") == "/var/data/**/*"


def test_explicit_wildcard_pattern_is_unchanged() -> None:
    assert normalize_pattern("src/*.py") == "src/*.py"
    assert normalize_pattern("src/**/*.md") == "src/**/*.md"


def test_single_file_root_is_matched_directly(tmp_path: Path) -> None:
    target = tmp_path / "notes.txt"
    target.write_text("hello", encoding="utf-8")

    pattern = resolve_walk_pattern(str(target))
    scan = discover_files(pattern)

    assert pattern == str(target)
    assert [record.path for record in scan.records] == [str(target.resolve())]


def test_directory_root_still_gets_recursive_pattern(tmp_path: Path) -> None:
    assert resolve_walk_pattern(str(tmp_path)) == f"{tmp_path}/**/*"


def test_recursive_wildcard_inside_component_is_rejected() -> None:
    with pytest.raises(GlobError, match="single path component"):
        validate_pattern("src/a**/*")


def test_empty_pattern_is_rejected() -> None:
    with pytest.raises(GlobError):
        validate_pattern("")
