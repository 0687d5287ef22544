# glr/utils/logging_utils.py
"""
Logging helpers for gitlab-reindex.

Console output goes through tqdm.write() so log lines emitted while the
project listing progress bar is active do not tear the bar apart.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

from tqdm import tqdm

LOGGER_NAME: Final[str] = "GitlabReindexLogger"

_DEFAULT_FMT: Final[str] = "[%(asctime)s][%(levelname)s] %(message)s"
_DEFAULT_DATEFMT: Final[str] = "%d-%m-%Y %H:%M:%S"

_LEVELS: Final[dict[str, int]] = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


class TqdmLoggingHandler(logging.Handler):
    """Logging handler that writes formatted records with tqdm.write()."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record))
        except Exception:
            self.handleError(record)


def coerce_log_level(value: int | str | None) -> int:
    """
    Turn a CLI-style level name into a logging constant.

    Unknown names and None fall back to INFO, which is where the pipeline
    reports dropped repositories and the delegate command line.
    """
    if value is None:
        return logging.INFO
    if isinstance(value, int):
        return value
    return _LEVELS.get(value.strip().upper(), logging.INFO)


def build_logger(
        *,
        name: str = LOGGER_NAME,
        level: int = logging.INFO,
        log_file: str | None = None,
        fmt: str = _DEFAULT_FMT,
        datefmt: str = _DEFAULT_DATEFMT,
) -> logging.Logger:
    """
    Build the pipeline logger: tqdm-safe console output plus an optional file.

    Existing handlers on the named logger are closed and replaced, so calling
    this repeatedly (e.g. from tests) never duplicates output.
    """
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(level)

    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    formatter = logging.Formatter(fmt, datefmt=datefmt)

    console = TqdmLoggingHandler(level=level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        log_path = Path(log_file).expanduser().resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_h = logging.FileHandler(log_path, encoding="utf-8")
        file_h.setLevel(level)
        file_h.setFormatter(formatter)
        logger.addHandler(file_h)

    return logger


def get_logger() -> logging.Logger:
    """Return the shared pipeline logger (unconfigured loggers inherit root settings)."""
    return logging.getLogger(LOGGER_NAME)
