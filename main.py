"""
Command line entry point for the Hacker News subreddit mirror.

Usage:
    # Mirror the current feed once and exit (non-zero on failure)
    python main.py run

    # Mirror the feed on the configured cron schedule until SIGINT/SIGTERM
    python main.py scheduler
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from collections.abc import Callable

from pydantic import ValidationError

from hnmirror.config import get_settings
from hnmirror.logger import setup_logging
from hnmirror.secrets import REQUIRED_SECRETS, load_runtime_secrets

LOGGER = logging.getLogger(__name__)


def run_once() -> int:
    """Run a single mirror pass."""
    from hnmirror.workers import run_mirror

    result = asyncio.run(run_mirror(get_settings()))
    if not result.success:
        LOGGER.error("Run failed: %s", result.message)
        return 1
    LOGGER.info("Done in %.2fs: %s", result.duration_seconds, result.message)
    return 0


async def _serve() -> None:
    from hnmirror.workers import run_scheduler

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on Windows; Ctrl+C still raises KeyboardInterrupt there.
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop.set)
    await run_scheduler(get_settings(), stop)


def run_schedule() -> int:
    """Run the mirror job on the configured schedule until interrupted."""

    settings = get_settings()
    LOGGER.info(
        "Starting %s v%s (%s) for r/%s",
        settings.app.name,
        settings.app.version,
        settings.app.environment.value,
        settings.reddit.subreddit,
    )
    try:
        asyncio.run(_serve())
    except KeyboardInterrupt:
        LOGGER.info("Interrupted by user")
    except Exception as exc:
        LOGGER.exception("Scheduler crashed: %s", exc)
        return 1
    return 0


COMMANDS: dict[str, tuple[str, Callable[[], int]]] = {
    "run": ("Mirror the feed once", run_once),
    "scheduler": ("Mirror the feed on a cron schedule", run_schedule),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hn-mirror",
        description="Mirror the Hacker News front page into a subreddit.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    for name, (help_text, _) in COMMANDS.items():
        subparsers.add_parser(name, help=help_text)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0

    load_runtime_secrets(required_keys=REQUIRED_SECRETS)
    try:
        setup_logging(get_settings())
    except ValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    _, command = COMMANDS[args.command]
    return command()


if __name__ == "__main__":
    sys.exit(main())
