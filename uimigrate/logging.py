"""Logging setup for migration runs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

_LOGGER_NAME = "uimigrate"


class _ConsoleFormatter(logging.Formatter):
    """Renders ``[uimigrate] LEVEL message``, naming the module when ``detailed``."""

    def __init__(self, detailed: bool) -> None:
        super().__init__("[%(tag)s] %(levelname)s %(message)s")
        self.detailed = detailed

    def format(self, record: logging.LogRecord) -> str:
        tag = _LOGGER_NAME
        if self.detailed and record.name.startswith(f"{_LOGGER_NAME}."):
            tag = f"{_LOGGER_NAME}:{record.name[len(_LOGGER_NAME) + 1 :]}"
        record.tag = tag
        return super().format(record)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``uimigrate.<name>``, e.g. ``get_logger("adapters.bolt")``."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME)


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Install console (and optional file) handlers on the uimigrate logger.

    Verbose runs log at DEBUG and tag each console line with the emitting
    module; otherwise only INFO and above reach the console. The file sink
    always records DEBUG so a failed run can be diagnosed afterwards.
    Calling this again replaces the previous handlers.
    """
    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose or log_file is not None else logging.INFO)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(stream)
    console.setLevel(console_level)
    console.setFormatter(_ConsoleFormatter(detailed=verbose))
    logger.addHandler(console)

    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
