"""Download every file in a cloud folder, then move it to the trash."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import AppConfig, load_config
from .errors import FatalError, exit_code_for
from .logging_utils import configure_logging
from .processor import build_runner

LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="drive-cleaner", description=__doc__)
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("config.json"),
        help="Path to the JSON configuration file.",
    )
    parser.add_argument(
        "--folder-id",
        help="Override the folder to empty (Drive folder id, or a path for the local provider).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Override the local directory downloaded files are written to.",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        help="Override the number of items requested per listing page.",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        help="Directory for daily log files (defaults to ./log).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging output.",
    )
    parser.add_argument(
        "--headless-token",
        action="store_true",
        help=(
            "Force the OAuth flow to run in console mode and discard any cached "
            "token so the run acquires a fresh one. Ignored for service accounts."
        ),
    )
    return parser.parse_args(argv)


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    if args.folder_id:
        if config.provider == "google_drive" and config.google_drive:
            config.google_drive.folder_id = args.folder_id
        elif config.local:
            config.local.path = Path(args.folder_id).expanduser().resolve()
    if args.output_dir:
        config.output.directory = args.output_dir.expanduser().resolve()
    if args.page_size is not None:
        config.page_size = AppConfig.parse_page_size(args.page_size)
    return config


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    config = None
    config_error: Exception | None = None
    try:
        config = apply_overrides(load_config(args.config), args)
    except (ValueError, FileNotFoundError) as exc:
        config_error = exc

    log_dir = args.log_dir or (config.logging.directory if config else None)
    keep_days = config.logging.keep_days if config else 7
    configure_logging(args.verbose, log_dir, keep_days=keep_days)

    if config is None:
        LOGGER.error("Invalid configuration %s: %s", args.config, config_error)
        return exit_code_for(config_error)

    try:
        runner = build_runner(
            config,
            force_console_oauth=args.headless_token,
            force_token_refresh=args.headless_token,
        )
        summary = runner.run(config.target_folder_id, config.output.directory)
    except FatalError as exc:
        LOGGER.error("Run aborted: %s", exc)
        return exit_code_for(exc)

    LOGGER.info(
        "Run complete: %s trashed, %s kept remotely, %s failed",
        summary.deleted,
        summary.transferred_not_deleted,
        summary.failed,
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
