import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console

from . import __version__
from .config import Settings
from .core.exceptions import HostsFileError, MountListingError, OrchestrationError
from .logging_config import setup_logging
from .presentation.terminal_writer import ConsoleTerminalWriter
from .services.mount_orchestrator import MountOrchestrator

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_INTERNAL = 70
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="remotemount",
        description="Mount every target listed in the hosts file with sshfs, in parallel.",
    )
    parser.add_argument(
        "--base-dir",
        type=Path,
        default=None,
        help="directory holding the mount points (default: ~/remote)",
    )
    parser.add_argument(
        "--hosts-file",
        type=Path,
        default=None,
        help="hosts file to read (default: <base-dir>/.hosts)",
    )
    parser.add_argument("--no-color", action="store_true", help="plain status lines")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="log level for messages on stderr",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Settings from env / settings file, with command line flags on top."""
    overrides = {}
    if args.base_dir is not None:
        overrides["base_dir"] = args.base_dir
    if args.hosts_file is not None:
        overrides["hosts_file"] = args.hosts_file
    if args.no_color:
        overrides["color"] = False
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    return Settings(**overrides)


async def run(settings: Settings, console: Optional[Console] = None) -> int:
    console = console or Console(no_color=not settings.color, highlight=False)
    writer = ConsoleTerminalWriter(console)
    line_width = min(settings.line_width, console.width)
    orchestrator = MountOrchestrator(settings, writer, line_width=line_width)

    try:
        await orchestrator.run()
    except (HostsFileError, MountListingError) as e:
        logging.error(str(e))
        return EXIT_FATAL
    except OrchestrationError:
        logging.exception("Mount orchestration broke an internal invariant")
        return EXIT_INTERNAL
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(args)
    setup_logging(settings)

    try:
        return asyncio.run(run(settings))
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
