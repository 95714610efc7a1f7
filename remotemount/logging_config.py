import logging
import logging.handlers
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from .config import Settings


def setup_logging(settings: Settings) -> None:
    # Logs go to stderr so they never land between the status lines on stdout
    console = Console(stderr=True, no_color=not settings.color)
    rich_handler = RichHandler(
        console=console,
        show_time=False,
        show_level=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
    )
    rich_handler.setLevel(settings.log_level)

    # Configure root logger (catches everything)
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.addHandler(rich_handler)

    if settings.log_directory is not None:
        settings.log_directory.mkdir(parents=True, exist_ok=True)

        # File handler with detailed format for debugging
        file_format = (
            "%(asctime)s - %(levelname)s - "
            "%(filename)s:%(lineno)d in %(funcName)s() - "
            "%(message)s"
        )
        file_handler = logging.handlers.TimedRotatingFileHandler(
            filename=Path(settings.log_file_path).expanduser(),
            when="midnight",
            interval=1,
            backupCount=settings.log_retention_days,
            encoding="utf-8",
        )
        file_handler.setLevel(settings.log_level)
        file_handler.setFormatter(logging.Formatter(file_format))
        root_logger.addHandler(file_handler)

    # Silence asyncio's own debug chatter
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.debug(
        f"Logging initialized - Level: {settings.log_level}, "
        f"File: {settings.log_file_path or '(none)'}"
    )
