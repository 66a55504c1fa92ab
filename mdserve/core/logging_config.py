"""
Logging setup driven by the server configuration.

Keys used from the config mapping:
    log_dir    directory for mdserve.log; empty or None logs to the console only
    log_level  console level name ("INFO", "WARNING", ...)
    debug      forces the console to DEBUG and lets request logs through
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, List, Mapping, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "mdserve.log"
LOG_FILE_SIZE = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT = 5

# Chatty third-party loggers: WARNING normally, INFO in debug mode
QUIET_LOGGERS = ("MARKDOWN", "werkzeug")

logger = logging.getLogger(__name__)

# Handlers added by the last setup_logging() call, replaced on the next one
_installed: List[logging.Handler] = []


def console_level(config: Mapping[str, Any]) -> int:
    """Console threshold for `config`. Raises ValueError for an unknown level name."""
    if config.get('debug'):
        return logging.DEBUG
    name = str(config.get('log_level') or 'INFO').strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"unknown log level {name!r}")
    return level


def log_file_path(config: Mapping[str, Any]) -> Optional[Path]:
    log_dir = config.get('log_dir')
    if not log_dir:
        return None
    return Path(log_dir) / LOG_FILE_NAME


def _remove_installed(root: logging.Logger) -> None:
    while _installed:
        handler = _installed.pop()
        root.removeHandler(handler)
        handler.close()


def setup_logging(config: Mapping[str, Any]) -> Optional[Path]:
    """
    (Re)configure the root logger for `config` and return the log file path,
    or None when file logging is off. Handlers installed by an earlier call
    are replaced; handlers added by anything else are left alone.
    """
    level = console_level(config)
    log_file = log_file_path(config)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    _remove_installed(root_logger)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    handlers: List[logging.Handler] = [console_handler]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_SIZE,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        # the file keeps everything the console filters out
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
        _installed.append(handler)
    root_logger.setLevel(min(handler.level for handler in handlers))

    quiet_level = logging.INFO if config.get('debug') else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    logger.info(f"Logging initialized: console={logging.getLevelName(level)}, "
                f"file={log_file if log_file is not None else 'off'}")
    return log_file
