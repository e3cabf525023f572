"""Command line entrypoint for indexing and sniffing file changes."""

from __future__ import annotations

import argparse
import json
import shlex
import subprocess
import sys
import time
import uuid
from collections.abc import Callable
from dataclasses import asdict
from pathlib import Path

from sniffers import __version__
from sniffers.config import CliOverrides, ConfigError, SnifferConfig, load_effective_config
from sniffers.index import Sniffer, SnifferError
from sniffers.logging import AuditEvent, JsonlAuditLogger, sanitize_metadata, utc_timestamp

DEFAULT_PATH = "."

CommandHandler = Callable[[argparse.Namespace, SnifferConfig], int]


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for the sniffers command line."""
    parser = argparse.ArgumentParser(
        prog="sniffers",
        description="Sniff for file changes in a directory using content hashes.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config-dir", required=False, default=None)
    parser.add_argument("--store", required=False, default=None)
    parser.add_argument("--audit-log", required=False, default=None)
    parser.add_argument("--no-audit", action="store_true", default=False)
    parser.add_argument("--chunk-bytes", type=int, required=False, default=None)

    subparsers = parser.add_subparsers(dest="command", required=True)

    index_parser = subparsers.add_parser("index", help="Record a fresh baseline of file hashes.")
    index_parser.add_argument("path", nargs="?", default=DEFAULT_PATH, help="Path to index.")

    sniff_parser = subparsers.add_parser("sniff", help="Report files changed since the baseline.")
    sniff_parser.add_argument("path", nargs="?", default=DEFAULT_PATH, help="Path to sniff.")
    sniff_parser.add_argument(
        "--run",
        required=False,
        default=None,
        metavar="COMMAND",
        help="Command to run when at least one file changed.",
    )

    subparsers.add_parser("status", help="Show effective config and store status.")

    history_parser = subparsers.add_parser("history", help="Show recent audit log events.")
    history_parser.add_argument("--since", required=False, default=None)
    history_parser.add_argument("--limit", type=int, required=False, default=20)
    return parser


def build_sniffer(path: str, config: SnifferConfig) -> Sniffer:
    """Configure an engine for one walk root."""
    return Sniffer(
        path,
        config.store_path,
        chunk_bytes=config.chunk_bytes,
        exclude_paths=config.internal_paths(),
    )


def run_index(args: argparse.Namespace, config: SnifferConfig) -> int:
    sniffer = build_sniffer(args.path, config)
    profile: dict[str, object] = {}
    started = time.perf_counter()
    try:
        sniffer.index(profile=profile)
    except SnifferError as exc:
        record_run(config, "index", {"path": args.path}, started, error=exc)
        return fail(f"Could not index files: {exc.message}", exc.hint)
    audit_ok = record_run(config, "index", {"path": args.path, **profile}, started)
    print("Done indexing!")
    return 0 if audit_ok else 1


def run_sniff(args: argparse.Namespace, config: SnifferConfig) -> int:
    sniffer = build_sniffer(args.path, config)
    profile: dict[str, object] = {}
    started = time.perf_counter()
    try:
        altered_files = sniffer.sniff(profile=profile)
    except SnifferError as exc:
        record_run(config, "sniff", {"path": args.path}, started, error=exc)
        return fail(f"Could not sniff files: {exc.message}", exc.hint)
    audit_ok = record_run(config, "sniff", {"path": args.path, **profile}, started)
    for altered in altered_files:
        print(altered)
    print("Done sniffing!")
    if not audit_ok:
        return 1
    if args.run is None or not altered_files:
        return 0
    return run_command(args.run)


def run_status(args: argparse.Namespace, config: SnifferConfig) -> int:
    sniffer = build_sniffer(DEFAULT_PATH, config)
    try:
        status = sniffer.status()
    except SnifferError as exc:
        return fail(f"Could not read store status: {exc.message}", exc.hint)
    payload = {"config": config.to_public_dict(), "store": asdict(status)}
    print(json.dumps(payload, indent=2, sort_keys=True))
    return 0


def run_history(args: argparse.Namespace, config: SnifferConfig) -> int:
    logger = JsonlAuditLogger(path=config.audit.path)
    for event in logger.read(since=args.since, limit=args.limit):
        print(json.dumps(event, sort_keys=True))
    return 0


def run_command(command: str) -> int:
    """Run a follow-up command without a shell and return its exit status."""
    argv = shlex.split(command)
    if not argv:
        return fail("Could not run command: command is empty.")
    try:
        completed = subprocess.run(argv, check=False)
    except OSError as exc:
        return fail(f"Could not run command {argv[0]!r}: {exc}")
    return completed.returncode


def record_run(
    config: SnifferConfig,
    operation: str,
    metadata: dict[str, object],
    started: float,
    error: SnifferError | None = None,
) -> bool:
    """Append one sanitized run event when the audit log is enabled.

    Returns False after reporting on stderr when the log cannot be written.
    """
    if not config.audit.enabled:
        return True
    payload = {
        **metadata,
        "store_path": str(config.store_path),
        "duration_ms": int((time.perf_counter() - started) * 1000),
    }
    event = AuditEvent(
        timestamp=utc_timestamp(),
        run_id=f"run-{uuid.uuid4().hex[:12]}",
        operation=operation,
        ok=error is None,
        error_code=error.code if error is not None else None,
        metadata=sanitize_metadata(payload),
    )
    try:
        JsonlAuditLogger(path=config.audit.path).append(event)
    except OSError as exc:
        fail(f"Could not write audit log: {config.audit.path} ({exc})")
        return False
    return True


def fail(message: str, hint: str | None = None) -> int:
    print(f"error: {message}", file=sys.stderr)
    if hint:
        print(f"hint: {hint}", file=sys.stderr)
    return 1


COMMANDS: dict[str, CommandHandler] = {
    "index": run_index,
    "sniff": run_sniff,
    "status": run_status,
    "history": run_history,
}


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the sniffers command line."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    overrides = CliOverrides(
        store_path=Path(args.store).resolve() if args.store is not None else None,
        audit_path=Path(args.audit_log).resolve() if args.audit_log is not None else None,
        audit_enabled=False if args.no_audit else None,
        chunk_bytes=args.chunk_bytes,
    )
    config_dir = Path(args.config_dir) if args.config_dir is not None else None
    try:
        config = load_effective_config(config_dir=config_dir, overrides=overrides)
    except ConfigError as exc:
        return fail(str(exc))
    return COMMANDS[args.command](args, config)


if __name__ == "__main__":
    raise SystemExit(main())
