"""Package logging: one ``torsift`` parent logger, children propagate to it.

The parent owns the only handler, so switching the destination or level at
runtime (from the CLI) affects every module logger at once.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional


PACKAGE_LOGGER = "torsift"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_LOG_PATH = Path.home() / ".cache" / "torsift" / "debug.log"


def _env_bool(key: str, default: bool) -> bool:
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() not in {"", "0", "false", "no", "off"}


def _env_path() -> Path:
    return Path(os.environ.get("TORSIFT_LOG_FILE", "") or DEFAULT_LOG_PATH).expanduser()


def _build_handler(to_stdout: bool, path: Path) -> logging.Handler:
    if to_stdout:
        handler: logging.Handler = logging.StreamHandler()
    else:
        path.parent.mkdir(parents=True, exist_ok=True)
        # opened on first record, so importing the package never touches disk
        handler = logging.FileHandler(path, mode="a", encoding="utf-8", delay=True)
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    return handler


def configure_logging(
    *,
    level: str | int | None = None,
    to_stdout: bool | None = None,
    path: Optional[Path] = None,
    force: bool = False,
) -> logging.Logger:
    """Attach the package handler; with ``force`` replace whatever is there.

    Unset arguments fall back to TORSIFT_LOG_LEVEL, TORSIFT_LOG_TO_STDOUT and
    TORSIFT_LOG_FILE.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if logger.handlers and not force:
        return logger

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    resolved_level = level if level is not None else os.environ.get("TORSIFT_LOG_LEVEL", "INFO")
    if isinstance(resolved_level, str):
        resolved_level = resolved_level.upper()
    resolved_stdout = to_stdout if to_stdout is not None else _env_bool("TORSIFT_LOG_TO_STDOUT", False)

    logger.setLevel(resolved_level)
    logger.addHandler(_build_handler(resolved_stdout, Path(path).expanduser() if path else _env_path()))
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Module logger under the package logger, configuring it on first use."""
    configure_logging()
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
