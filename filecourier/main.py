#!/usr/bin/env python3
"""
filecourier - command line entry point.

Watches one directory tree and uploads every file that is closed after a
write to the configured destination, using the file's folder below the
watched root as its context.
"""

from __future__ import annotations

import argparse
import signal
import sys
from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import ValidationError

from filecourier.dispatch import Dispatcher
from filecourier.errors import CourierError, FatalConfigError
from filecourier.models.schemas import WatchConfig
from filecourier.uploaders import AnyUploader, WorkspaceUploader, build_uploader
from filecourier.utils.config import Settings, get_settings
from filecourier.watchers.filesystem import EventSource

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str) -> None:
    """Replace loguru's default sink with the application format."""
    logger.remove()
    logger.add(sys.stdout, format=LOG_FORMAT, level=level.upper())


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments. Anything omitted falls back to the environment."""

    parser = argparse.ArgumentParser(
        description="Upload files closed after writing in a watched folder.",
    )
    parser.add_argument(
        "--watch-dir",
        type=Path,
        default=None,
        help="Directory to watch recursively (env: WATCH_DIR).",
    )
    parser.add_argument(
        "--uploader",
        choices=("webhook", "workspace"),
        default=None,
        help="Destination kind (env: UPLOADER, inferred from credentials if unset).",
    )
    parser.add_argument(
        "--include-dotfiles",
        action="store_true",
        help="Upload files whose name starts with a dot (env: IGNORE_DOTFILES=false).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (env: LOG_LEVEL, default INFO).",
    )

    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    """
    Merge CLI overrides into the environment settings.

    Raises:
        FatalConfigError: the environment holds invalid values
    """
    try:
        settings = get_settings()
    except ValidationError as e:
        raise FatalConfigError(f"invalid configuration: {e}") from e

    overrides = {}
    if args.watch_dir is not None:
        overrides["watch_dir"] = args.watch_dir
    if args.uploader is not None:
        overrides["uploader"] = args.uploader
    if args.include_dotfiles:
        overrides["ignore_dotfiles"] = False
    if args.log_level is not None:
        overrides["log_level"] = args.log_level

    return settings.model_copy(update=overrides)


def build_watch_config(settings: Settings) -> WatchConfig:
    """
    Canonicalize the watched root.

    Raises:
        FatalConfigError: WATCH_DIR missing or not a directory
    """
    if settings.watch_dir is None:
        raise FatalConfigError("WATCH_DIR not provided")

    try:
        watch_root = settings.watch_dir.expanduser().resolve(strict=True)
    except OSError as e:
        raise FatalConfigError(f"cannot canonicalize {settings.watch_dir}: {e}") from e

    if not watch_root.is_dir():
        raise FatalConfigError(f"{watch_root} is not a directory")

    return WatchConfig(watch_root=watch_root, ignore_hidden=settings.ignore_dotfiles)


def announce(uploader: AnyUploader, settings: Settings, config: WatchConfig) -> None:
    """Tell the default workspace channel which folder is being watched."""
    if not (settings.workspace_announce and isinstance(uploader, WorkspaceUploader)):
        return
    if not settings.workspace_channel:
        logger.warning("WORKSPACE_ANNOUNCE is set but WORKSPACE_CHANNEL is not")
        return

    try:
        uploader.post_message(
            settings.workspace_channel,
            f"Watching `{config.watch_root}` for new files",
        )
    except CourierError as e:
        logger.warning(f"Could not post startup announcement: {e}")


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the CLI."""

    args = parse_args(argv)

    try:
        settings = load_settings(args)
        configure_logging(settings.log_level)
        config = build_watch_config(settings)
        uploader = build_uploader(settings)
        source = EventSource(config.watch_root, poll_interval=settings.queue_poll_interval)
        source.start()

    except FatalConfigError as e:
        logger.error(f"Startup failed: {e}")
        return 1

    logger.info(
        f"Uploading to {type(uploader).__name__}, "
        f"dotfiles {'ignored' if config.ignore_hidden else 'included'}"
    )
    announce(uploader, settings, config)

    def _signal_handler(signum, frame):  # noqa: D401
        logger.info(f"Received signal {signum}, shutting down.")
        source.close()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    dispatcher = Dispatcher(config, uploader)
    try:
        uploaded = dispatcher.run(source)
        requested = source.closed
    finally:
        source.stop()
        uploader.close()

    logger.info(f"Stopped after {uploaded} upload(s)")
    if not requested:
        logger.error("Watch source ended unexpectedly")
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI bridge
    sys.exit(main())
