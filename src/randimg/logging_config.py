"""Logging setup shared by the CLI and the HTTP server."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from randimg.config.models import LoggingSettings

LOG_FORMAT = "[%(asctime)s][%(levelname)s] %(name)s: %(message)s"
_HANDLER_MARKER = "_randimg_handler"


def configure_logging(settings: LoggingSettings) -> logging.Logger:
    """Attach randimg handlers to the package logger.

    Console output goes to stderr through Rich. When `settings.file` is set a
    rotating file handler is added as well. Calling this again replaces the
    handlers installed by a previous call.

    Args:
        settings: Logging section of the loaded configuration.

    Returns:
        logging.Logger: The configured `randimg` logger.
    """
    logger = logging.getLogger("randimg")
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    handlers: list[logging.Handler] = [console_handler]

    if settings.file:
        log_path = Path(settings.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max(settings.max_size_mb, 1) * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    for handler in handlers:
        setattr(handler, _HANDLER_MARKER, True)
        logger.addHandler(handler)
    logger.setLevel(settings.level)
    return logger


__all__ = ["configure_logging", "LOG_FORMAT"]
