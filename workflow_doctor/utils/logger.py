# utils/logger.py
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler


ROOT_LOGGER = "workflow_doctor"
DEFAULT_LEVEL = "WARNING"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_ANSI = (
    (logging.ERROR, "\033[91m"),    # red
    (logging.WARNING, "\033[93m"),  # yellow
    (logging.INFO, "\033[92m"),     # green
)


def level_from_env(default: str = DEFAULT_LEVEL) -> int:
    """LOG_LEVEL by name (DEBUG, INFO, ...); unknown names fall back to `default`."""
    name = os.getenv("LOG_LEVEL", default).strip().upper()
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    return logging.getLevelName(default.upper())


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever sys.stderr is at emit time (CLI runners swap it out)."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


class _DiagnosticFormatter(logging.Formatter):
    """Colours the whole line by level when stderr is a terminal."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        if not sys.stderr.isatty():
            return line
        for threshold, code in _ANSI:
            if record.levelno >= threshold:
                return f"{code}{line}\033[0m"
        return line


def init_logger(
    level: int | None = None,
    log_dir: str | Path | None = None,
    file_name: str = "doctor.log",
    file_max_mb: int = 5,
    file_backup: int = 3,
) -> logging.Logger:
    """
    Configure the `workflow_doctor` logger for a CLI run.

    Diagnostics go to stderr so command output on stdout (scores, raw JSON)
    stays clean. With `log_dir`, a rotating doctor.log is kept as well.
    Calling it again replaces the previous handlers.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for h in list(logger.handlers):
        h.close()
    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(level if level is not None else level_from_env())

    console = _StderrHandler()
    console.setFormatter(_DiagnosticFormatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            filename=str(log_dir / file_name),
            maxBytes=file_max_mb * 1024 * 1024,
            backupCount=file_backup,
            encoding="utf-8",
        )
        fh.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(fh)

    return logger


def get_logger(child: str) -> logging.Logger:
    """Logger for one area of the doctor, e.g. get_logger("health")."""
    return logging.getLogger(ROOT_LOGGER).getChild(child)
