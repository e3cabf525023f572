"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from sniffers.index.hashing import DEFAULT_CHUNK_BYTES
from sniffers.index.store import HASH_STORE_FILE

CONFIG_FILE_NAME = "sniffers.toml"
AUDIT_LOG_FILE = ".sniffers.audit.jsonl"
MAX_CHUNK_BYTES_CAP = 16 * 1024 * 1024


class ConfigError(ValueError):
    """Raised when sniffers.toml or startup overrides are invalid."""


@dataclass(slots=True, frozen=True)
class AuditConfig:
    """Audit log settings."""

    enabled: bool
    path: Path


@dataclass(slots=True, frozen=True)
class SnifferConfig:
    """Fully merged sniffers configuration."""

    config_dir: Path
    store_path: Path
    chunk_bytes: int
    audit: AuditConfig

    def internal_paths(self) -> tuple[Path, ...]:
        """Return files owned by the tool that must never be walked."""
        if self.audit.enabled:
            return (self.store_path, self.audit.path)
        return (self.store_path,)

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for status output."""
        return {
            "config_dir": str(self.config_dir),
            "store_path": str(self.store_path),
            "chunk_bytes": self.chunk_bytes,
            "audit": {
                "enabled": self.audit.enabled,
                "path": str(self.audit.path),
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    store_path: Path | None = None
    audit_path: Path | None = None
    audit_enabled: bool | None = None
    chunk_bytes: int | None = None


def default_config(config_dir: Path) -> SnifferConfig:
    """Build default config for a given working directory."""
    resolved_dir = config_dir.resolve()
    return SnifferConfig(
        config_dir=resolved_dir,
        store_path=resolved_dir / HASH_STORE_FILE,
        chunk_bytes=DEFAULT_CHUNK_BYTES,
        audit=AuditConfig(enabled=True, path=resolved_dir / AUDIT_LOG_FILE),
    )


def load_config_file(config_dir: Path) -> dict[str, object]:
    """Load optional sniffers.toml from the config directory."""
    config_path = config_dir / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    try:
        with config_path.open("rb") as handle:
            payload = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{CONFIG_FILE_NAME} is not valid TOML: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{key}' must be a table.")
    return value


def _optional_path(value: object, name: str, base_dir: Path, default: Path) -> Path:
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Config field '{name}' must be a non-empty string.")
    candidate = Path(value).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    return candidate.resolve()


def merge_config(
    base: SnifferConfig, file_payload: dict[str, object], overrides: CliOverrides
) -> SnifferConfig:
    """Merge defaults, sniffers.toml, then CLI overrides."""
    store_payload = _get_table(file_payload, "store")
    audit_payload = _get_table(file_payload, "audit")
    hashing_payload = _get_table(file_payload, "hashing")

    store_path = _optional_path(
        store_payload.get("path"), "store.path", base.config_dir, base.store_path
    )
    audit_path = _optional_path(
        audit_payload.get("path"), "audit.path", base.config_dir, base.audit.path
    )
    audit_enabled = base.audit.enabled
    if "enabled" in audit_payload:
        raw_enabled = audit_payload["enabled"]
        if not isinstance(raw_enabled, bool):
            raise ConfigError("Config field 'audit.enabled' must be a boolean.")
        audit_enabled = raw_enabled
    chunk_bytes = _optional_positive_int_with_cap(
        hashing_payload.get("chunk_bytes"),
        "hashing.chunk_bytes",
        base.chunk_bytes,
        MAX_CHUNK_BYTES_CAP,
    )

    merged = SnifferConfig(
        config_dir=base.config_dir,
        store_path=store_path,
        chunk_bytes=chunk_bytes,
        audit=AuditConfig(enabled=audit_enabled, path=audit_path),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: SnifferConfig, overrides: CliOverrides) -> SnifferConfig:
    """Apply startup overrides at highest precedence."""
    chunk_bytes = _optional_positive_int_with_cap(
        overrides.chunk_bytes,
        "overrides.chunk_bytes",
        config.chunk_bytes,
        MAX_CHUNK_BYTES_CAP,
    )
    store_path = overrides.store_path or config.store_path
    audit_path = overrides.audit_path or config.audit.path
    audit_enabled = (
        overrides.audit_enabled if overrides.audit_enabled is not None else config.audit.enabled
    )
    return SnifferConfig(
        config_dir=config.config_dir,
        store_path=store_path.resolve(),
        chunk_bytes=chunk_bytes,
        audit=AuditConfig(enabled=audit_enabled, path=audit_path.resolve()),
    )


def load_effective_config(
    config_dir: Path | None = None, overrides: CliOverrides | None = None
) -> SnifferConfig:
    """Load effective config using merge order defaults -> sniffers.toml -> overrides."""
    resolved_dir = (config_dir or Path.cwd()).resolve()
    base = default_config(resolved_dir)
    payload = load_config_file(resolved_dir)
    return merge_config(base, payload, overrides or CliOverrides())


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ConfigError(f"Config field '{name}' must be <= {cap}.")
    return value
