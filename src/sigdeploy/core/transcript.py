"""Run transcript: timestamped log output to the console and an optional file."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOGGER_NAME = "sigdeploy"

_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: str = "INFO",
    transcript_path: Path | None = None,
    debug: bool = False,
) -> logging.Logger:
    """Attach console and transcript handlers to the package logger.

    Logging problems never abort a run: emit errors are suppressed and a
    transcript file that cannot be opened is reported on the console and
    skipped.
    """
    logging.raiseExceptions = False

    logger = logging.getLogger(LOGGER_NAME)
    effective = logging.DEBUG if debug else logging.getLevelName(level.upper())
    if not isinstance(effective, int):
        effective = logging.INFO
    logger.setLevel(effective)

    if logger.handlers:
        return logger

    fmt = logging.Formatter(_FORMAT, datefmt=_DATEFMT)

    sh = logging.StreamHandler(sys.stderr)
    sh.setFormatter(fmt)
    logger.addHandler(sh)

    if transcript_path is not None:
        try:
            transcript_path.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(transcript_path, encoding="utf-8")
        except OSError as exc:
            logger.warning("Transcript %s unavailable, console only: %s", transcript_path, exc)
        else:
            fh.setFormatter(fmt)
            logger.addHandler(fh)

    return logger


def reset_logging() -> None:
    """Detach and close all package handlers."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
