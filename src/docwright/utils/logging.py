"""Logging setup for docwright hosts and scripts."""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

__all__ = ["setup_logging", "get_log_path", "LOG_DIR_ENV"]

LOG_DIR_ENV = "DOCWRIGHT_LOG_DIR"
_LOG_FILENAME = "docwright.log"
_DEFAULT_LOG_DIR = Path.home() / ".docwright" / "logs"
_NOISY_LOGGERS: tuple[str, ...] = ("asyncio", "httpx", "httpcore", "openai")
_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_CONFIGURED = False
_LOG_PATH: Path | None = None


def setup_logging(
    level: int | str = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    force: bool = False,
) -> Path:
    """Send records to a rotating log file and, optionally, the console.

    Repeated calls return the existing log path unless ``force`` is set.
    """

    global _CONFIGURED, _LOG_PATH
    if _CONFIGURED and not force and _LOG_PATH is not None:
        return _LOG_PATH

    resolved_level = _coerce_level(level)
    target_dir = _resolve_log_dir(log_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    log_path = target_dir / _LOG_FILENAME
    formatter = logging.Formatter(fmt=_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [file_handler]
    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)
    for handler in handlers:
        handler.setLevel(resolved_level)

    logging.basicConfig(level=resolved_level, handlers=handlers, force=True)
    logging.captureWarnings(True)
    _quiet_external_loggers(resolved_level)

    _CONFIGURED = True
    _LOG_PATH = log_path
    logging.getLogger(__name__).debug("Logging to %s", log_path)
    return log_path


def get_log_path() -> Path | None:
    """Return the configured log file, or ``None`` before :func:`setup_logging`."""

    return _LOG_PATH


def _coerce_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def _resolve_log_dir(log_dir: Path | str | None) -> Path:
    env_override = os.environ.get(LOG_DIR_ENV)
    return Path(log_dir or env_override or _DEFAULT_LOG_DIR).expanduser()


def _quiet_external_loggers(root_level: int) -> None:
    quiet_level = max(root_level, logging.WARNING)
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(quiet_level)
