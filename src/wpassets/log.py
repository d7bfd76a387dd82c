"""Logging setup for the CLI and the web app."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from wpassets.config.models import LoggingSettings

LOG_FILENAME = "wpassets.log"
_HANDLER_MARKER = "_wpassets_handler"


def configure_logging(
    settings: LoggingSettings,
    *,
    log_dir: Path | None = None,
    console: Console | None = None,
) -> logging.Logger:
    """Configure the ``wpassets`` logger hierarchy.

    Console output goes to stderr through rich. When ``log_dir`` is given a
    rotating ``wpassets.log`` is written there as well; if the directory
    cannot be used a warning is logged and only console output remains.
    Calling this again replaces the handlers installed by a previous call.
    """
    logger = logging.getLogger("wpassets")
    logger.setLevel(settings.level)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    console_handler.setLevel(settings.level)
    _mark(console_handler)
    logger.addHandler(console_handler)

    if log_dir is not None:
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_dir / LOG_FILENAME,
                maxBytes=settings.max_size_mb * 1024 * 1024,
                backupCount=settings.backup_count,
                encoding="utf-8",
            )
        except OSError as exc:
            logger.warning("Unable to open log file in %s: %s", log_dir, exc)
            return logger
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        # The file keeps the full import trail regardless of console verbosity.
        file_handler.setLevel(logging.INFO)
        _mark(file_handler)
        logger.addHandler(file_handler)
        logger.setLevel(min(logger.level, logging.INFO))

    return logger


def _mark(handler: logging.Handler) -> None:
    setattr(handler, _HANDLER_MARKER, True)


__all__ = ["configure_logging", "LOG_FILENAME"]
