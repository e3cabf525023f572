from __future__ import annotations

from pathlib import Path

from sniffers.config import CliOverrides, load_effective_config


def test_defaults_live_in_config_dir(tmp_path: Path) -> None:
    config = load_effective_config(config_dir=tmp_path)

    assert config.store_path == (tmp_path / ".sniffers").resolve()
    assert config.audit.enabled is True
    assert config.audit.path == (tmp_path / ".sniffers.audit.jsonl").resolve()
    assert config.chunk_bytes == 1024
    assert config.internal_paths() == (config.store_path, config.audit.path)


def test_merge_order_defaults_then_file_then_cli(tmp_path: Path) -> None:
    (tmp_path / "sniffers.toml").write_text(
        "\n".join(
            [
                "[store]",
                'path = "state/hashes"',
                "",
                "[hashing]",
                "chunk_bytes = 4096",
                "",
                "[audit]",
                "enabled = false",
            ]
        ),
        encoding="utf-8",
    )
    overrides = CliOverrides(chunk_bytes=8192, audit_enabled=True)

    config = load_effective_config(config_dir=tmp_path, overrides=overrides)

    assert config.store_path == (tmp_path / "state" / "hashes").resolve()
    assert config.chunk_bytes == 8192
    assert config.audit.enabled is True


def test_store_override_has_highest_precedence(tmp_path: Path) -> None:
    (tmp_path / "sniffers.toml").write_text('[store]\npath = "from-file"\n', encoding="utf-8")
    custom = tmp_path / "custom" / ".sniffers"

    config = load_effective_config(config_dir=tmp_path, overrides=CliOverrides(store_path=custom))

    assert config.store_path == custom.resolve()


def test_disabled_audit_is_not_an_internal_path(tmp_path: Path) -> None:
    config = load_effective_config(
        config_dir=tmp_path, overrides=CliOverrides(audit_enabled=False)
    )

    assert config.internal_paths() == (config.store_path,)


def test_public_dict_snapshot(tmp_path: Path) -> None:
    config = load_effective_config(config_dir=tmp_path)

    assert config.to_public_dict() == {
        "config_dir": str(tmp_path.resolve()),
        "store_path": str((tmp_path / ".sniffers").resolve()),
        "chunk_bytes": 1024,
        "audit": {
            "enabled": True,
            "path": str((tmp_path / ".sniffers.audit.jsonl").resolve()),
        },
    }
