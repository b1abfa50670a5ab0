# src/xregister/shared/logging_conf.py
"""
Logging Setup - Root Logger for Sync, API and CLI

Configures the root logger once per process. Records go to stdout, to a
size-rotated xregister.log, or both. Chatty third-party loggers (werkzeug
request lines, urllib3 connection pool) never log below WARNING.

Files that USE this module:
- xregister.app (main configures logging from Settings)
- tests.test_settings (file output test)

Files that this module USES:
- None
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "xregister.log"

_NOISY_LOGGERS = ("werkzeug", "urllib3")

PathLike = Union[str, Path]


def _resolve_log_path(log_file: Optional[PathLike], log_dir: Optional[PathLike]) -> Optional[Path]:
    """LOG_DIR wins over LOG_FILE; returns None when file output is off."""
    if log_dir:
        path = Path(log_dir) / LOG_FILE_NAME
    elif log_file:
        path = Path(log_file)
    else:
        return None
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _build_handlers(
    log_path: Optional[Path], log_stdout: bool, max_bytes: int, backup_count: int
) -> list[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    handlers: list[logging.Handler] = []

    # stdout is the fallback when nothing else was asked for
    if log_stdout or log_path is None:
        handlers.append(logging.StreamHandler(sys.stdout))

    if log_path is not None:
        handlers.append(
            RotatingFileHandler(
                log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[PathLike] = None,
    log_dir: Optional[PathLike] = None,
    log_stdout: bool = True,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """
    Configure the root logger, replacing any handlers already installed.

    Args:
        level: Level or level name for the application loggers
        log_file: Explicit log file path
        log_dir: Directory for xregister.log (takes precedence over log_file)
        log_stdout: Also write to stdout; disable under supervisors that capture output
        max_bytes: Rotate the file once it reaches this size
        backup_count: Rotated files to keep
    """
    log_path = _resolve_log_path(log_file, log_dir)
    logging.basicConfig(
        level=level,
        handlers=_build_handlers(log_path, log_stdout, max_bytes, backup_count),
        force=True,
    )

    root_level = logging.getLogger().level
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))

    logging.getLogger(__name__).info(
        "Logging configured: level=%s, stdout=%s, file=%s",
        logging.getLevelName(root_level), log_stdout, log_path or "-",
    )
