"""Command line interface for dsym_uploader."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from rich.logging import RichHandler

from . import __version__
from .cli_progress import (
    UploadProgressDisplay,
    mask_secret,
    render_configuration_summary,
    render_failure,
    render_run_summary,
)
from .config import load_upload_config
from .errors import DSymUploadError, UploadError
from .models import UploadConfig
from .orchestrator import RunSummary, UploadOrchestrator
from .protocols import ConnectionFactory
from .services.api_client import build_connection


class CLIError(RuntimeError):
    """Raised when command line input (such as an env file) cannot be used."""


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Configure logging.

    Default behavior is silent unless --debug or --log-level is provided.
    Returns a string describing effective mode.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    logging.disable(logging.NOTSET)

    if silent or (not debug and not log_level):
        logging.disable(logging.CRITICAL)
        root_logger.setLevel(logging.CRITICAL + 1)
        return "silent"

    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, log_level.upper(), logging.INFO)

    handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    return logging.getLevelName(level)


def _parse_env_line(raw_line: str) -> Optional[Tuple[str, str]]:
    """Return ``(key, value)`` for a dotenv assignment, None for anything else."""
    line = raw_line.strip()
    if line.startswith("export "):
        line = line[len("export ") :].lstrip()
    key, sep, value = line.partition("=")
    key = key.strip()
    if not sep or not key or key.startswith("#"):
        return None

    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        value = value[1:-1]
    return key, value


def _load_env_file(path: Path, override: bool = False) -> List[str]:
    """Export the assignments of a dotenv file; returns the keys that were set."""
    if not path.is_file():
        reason = "is not a file" if path.exists() else "not found"
        raise CLIError(f"env file {reason}: {path}")

    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        raise CLIError(f"could not read env file {path}: {exc}") from exc

    applied = []
    for entry in filter(None, map(_parse_env_line, lines)):
        key, value = entry
        if override or key not in os.environ:
            os.environ[key] = value
            applied.append(key)
    return applied


def _resolve_default_env_file() -> Optional[Path]:
    candidate = Path.cwd() / ".env"
    return candidate if candidate.is_file() else None


def _run_upload(config: UploadConfig, connection_factory: ConnectionFactory) -> RunSummary:
    orchestrator = UploadOrchestrator(connection_factory)
    try:
        with UploadProgressDisplay() as display:
            summary = orchestrator.run(
                config,
                progress_callback=display.on_file_progress,
                file_start_callback=display.on_file_start,
            )
    except UploadError as exc:
        render_failure(exc.result)
        raise
    render_run_summary(summary)
    return summary


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appdynamics-dsym",
        description="Upload dSYM symbolication files to AppDynamics.",
    )
    parser.add_argument(
        "--api-host",
        default=None,
        help="API host url for AppDynamics (default from APPDYNAMICS_HOST "
        "or https://api.eum-appdynamics.com)",
    )
    parser.add_argument(
        "--api-account-name",
        default=None,
        help="Account name for AppDynamics (default from APPDYNAMICS_ACCOUNT_NAME)",
    )
    parser.add_argument(
        "--api-license-key",
        default=None,
        help="License key for AppDynamics (default from APPDYNAMICS_LICENSE_KEY)",
    )
    parser.add_argument(
        "--dsym-path",
        default=None,
        help="Path to your symbols file, e.g. ./App.dSYM.zip "
        "(default from APPDYNAMICS_DSYM_PATH or DSYM_OUTPUT_PATH)",
    )
    parser.add_argument(
        "--dsym-paths",
        action="append",
        default=None,
        metavar="PATH",
        help="Additional symbols file, repeatable "
        "(default from APPDYNAMICS_DSYM_PATHS or DSYM_PATHS, comma separated)",
    )
    parser.add_argument(
        "--dsym-zip-path",
        default=None,
        help="Zipped dSYM produced by a previous build step (default from DSYM_ZIP_PATH)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (default from APPDYNAMICS_TIMEOUT or 300)",
    )
    parser.add_argument(
        "--max-redirects",
        type=int,
        default=None,
        help="Redirect hops followed per upload (default 5)",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print errors")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"appdynamics-dsym {__version__}",
    )
    return parser


def run_cli(
    argv: Optional[Sequence[str]] = None,
    connection_factory: ConnectionFactory = build_connection,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    used_env_file = args.env_file or _resolve_default_env_file()
    if used_env_file is not None:
        try:
            _load_env_file(Path(used_env_file))
        except CLIError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    try:
        config = load_upload_config(
            api_host=args.api_host,
            account_name=args.api_account_name,
            license_key=args.api_license_key,
            dsym_path=args.dsym_path,
            dsym_paths=args.dsym_paths,
            dsym_zip_path=args.dsym_zip_path,
            timeout=args.timeout,
            max_redirects=args.max_redirects,
        )
    except DSymUploadError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if not args.silent:
        render_configuration_summary(
            {
                "API Host": config.api_host,
                "Account": config.account_name or "(missing)",
                "License Key": mask_secret(config.license_key),
                "dSYM Path": config.dsym_path or "-",
                "dSYM Zip Path": config.dsym_zip_path or "-",
                "dSYM Paths": ", ".join(config.dsym_paths) if config.dsym_paths else "-",
                "Timeout": f"{config.timeout:g}s",
                "Env File": str(used_env_file) if used_env_file else "-",
                "Logging": effective_log_mode,
            }
        )

    try:
        _run_upload(config, connection_factory)
    except DSymUploadError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return 130
    return 0


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
