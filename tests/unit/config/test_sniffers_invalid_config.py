from __future__ import annotations

from pathlib import Path

import pytest

from sniffers.config import CliOverrides, ConfigError, load_effective_config


def test_invalid_section_type_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / "sniffers.toml").write_text('store = "not-a-table"\n', encoding="utf-8")

    with pytest.raises(ConfigError, match="section 'store'"):
        load_effective_config(config_dir=tmp_path)


def test_invalid_chunk_bytes_type_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / "sniffers.toml").write_text(
        '[hashing]\nchunk_bytes = "big"\n', encoding="utf-8"
    )

    with pytest.raises(ConfigError, match="hashing.chunk_bytes"):
        load_effective_config(config_dir=tmp_path)


def test_chunk_bytes_above_cap_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="overrides.chunk_bytes"):
        load_effective_config(
            config_dir=tmp_path, overrides=CliOverrides(chunk_bytes=64 * 1024 * 1024)
        )


def test_non_boolean_audit_flag_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / "sniffers.toml").write_text("[audit]\nenabled = 1\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="audit.enabled"):
        load_effective_config(config_dir=tmp_path)


def test_empty_store_path_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / "sniffers.toml").write_text('[store]\npath = ""\n', encoding="utf-8")

    with pytest.raises(ConfigError, match="store.path"):
        load_effective_config(config_dir=tmp_path)


def test_malformed_toml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / "sniffers.toml").write_text("[store\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="not valid TOML"):
        load_effective_config(config_dir=tmp_path)
