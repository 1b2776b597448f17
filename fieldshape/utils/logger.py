# fieldshape/utils/logger.py
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Union

ROOT_LOGGER = "fieldshape"
LOG_FILE = "fieldshape.log"

_FMT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d - %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

_COLORS = (
    (logging.ERROR, "\033[91m"),    # red
    (logging.WARNING, "\033[93m"),  # yellow
    (logging.INFO, "\033[92m"),     # green
)

LevelLike = Union[int, str, None]


def resolve_level(level: LevelLike = None) -> int:
    """
    Turn a level name or number into a logging level.

    None reads LOG_LEVEL from the environment (unknown names there fall back
    to INFO); an unknown name passed explicitly is a ValueError.
    """
    if isinstance(level, int):
        return level
    if level is None:
        name = os.getenv("LOG_LEVEL", "INFO").upper()
        value = logging.getLevelName(name)
        return value if isinstance(value, int) else logging.INFO
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


class _ColorFormatter(logging.Formatter):
    """Colours whole lines by level when writing to a terminal."""

    def __init__(self, stream, **kwargs):
        super().__init__(**kwargs)
        self._color = stream.isatty() and "NO_COLOR" not in os.environ

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        if not self._color:
            return line
        for threshold, code in _COLORS:
            if record.levelno >= threshold:
                return f"{code}{line}\033[0m"
        return line


def init_logger(
    name: str = ROOT_LOGGER,
    level: LevelLike = None,
    log_dir: str | Path | None = None,
    file_name: str = LOG_FILE,
    file_max_mb: int = 5,
    file_backup: int = 3,
) -> logging.Logger:
    """
    (Re)configure the project logger:
      - stream handler on stderr, so command output on stdout stays parseable
      - optional rotating file handler under `log_dir`
    Previous handlers are closed and replaced.
    """
    logger = logging.getLogger(name)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.propagate = False
    logger.setLevel(resolve_level(level))

    sh = logging.StreamHandler(sys.stderr)
    sh.setFormatter(_ColorFormatter(sys.stderr, fmt=_FMT, datefmt=_DATEFMT))
    logger.addHandler(sh)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            filename=str(log_dir / file_name),
            maxBytes=file_max_mb * 1024 * 1024,
            backupCount=file_backup,
            encoding="utf-8",
        )
        fh.setFormatter(logging.Formatter(fmt=_FMT, datefmt=_DATEFMT))
        logger.addHandler(fh)

    return logger


def set_level(level: LevelLike, name: str = ROOT_LOGGER) -> int:
    """Change the project logger's level in place and return the new level."""
    value = resolve_level(level)
    logging.getLogger(name).setLevel(value)
    return value


log = init_logger()


def get_logger(child: str) -> logging.Logger:
    """Child logger under the project logger, e.g. get_logger("cli")."""
    return logging.getLogger(ROOT_LOGGER).getChild(child)
