"""structlog setup: JSON lines to a rotating file, colored lines to stderr.

structlog events and plain stdlib records (Django, RQ, gunicorn) go through
the same processor chain, so both outputs carry request and owner IDs.
"""

import logging
import os
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path

import structlog

from core.logging.processors import (
    ConsoleRenderer,
    add_request_context,
    add_runtime_context,
)

DEFAULT_LOG_FILE_PATH = "./logs/workspace-notifications.log"
MAX_LOG_FILE_BYTES = 50 * 1024 * 1024
LOG_BACKUP_COUNT = 20
LOG_RETENTION_DAYS = 10

PRE_CHAIN = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    add_request_context,
    add_runtime_context,
]


def _log_file_path() -> Path:
    return Path(os.getenv("LOG_FILE_PATH", DEFAULT_LOG_FILE_PATH))


def _handler(handler: logging.Handler, renderer) -> logging.Handler:
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                renderer,
            ],
            foreign_pre_chain=PRE_CHAIN,
        )
    )
    return handler


def setup_logging() -> None:
    """Route all logging through structlog.

    Environment:
        LOG_LEVEL: root level, INFO by default.
        LOG_FILE_PATH: JSON log file, rotated at 50MB with 20 backups.
        LOG_TO_FILE: set to "false" to log to the console only.
        LOG_COLORS: set to "false" for plain console lines.
    """
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level, level_name = logging.INFO, "INFO"

    colors = os.getenv("LOG_COLORS", "true").lower() == "true"
    handlers = [_handler(logging.StreamHandler(), ConsoleRenderer(colors=colors))]

    log_file = None
    if os.getenv("LOG_TO_FILE", "true").lower() == "true":
        log_file = _log_file_path()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            _handler(
                RotatingFileHandler(
                    log_file,
                    maxBytes=MAX_LOG_FILE_BYTES,
                    backupCount=LOG_BACKUP_COUNT,
                    encoding="utf-8",
                ),
                structlog.processors.JSONRenderer(),
            )
        )

    structlog.configure(
        processors=[
            *PRE_CHAIN,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in handlers:
        root.addHandler(handler)

    structlog.get_logger(__name__).info(
        "logging_configured",
        log_file=str(log_file) if log_file else None,
        log_level=level_name,
    )


def cleanup_old_logs(
    log_file_path: str | Path | None = None,
    retention_days: int = LOG_RETENTION_DAYS,
) -> int:
    """Delete rotated backups (`<name>.1`, `<name>.2`, ...) past retention.

    Returns:
        Number of files deleted.
    """
    log_file = Path(log_file_path) if log_file_path else _log_file_path()
    cutoff = time.time() - retention_days * 86400
    logger = structlog.get_logger(__name__)

    deleted = 0
    for backup in log_file.parent.glob(f"{log_file.name}.*"):
        try:
            if backup.stat().st_mtime < cutoff:
                backup.unlink()
                deleted += 1
        except OSError as e:
            logger.warning("log_file_delete_failed", file=str(backup), error=str(e))

    if deleted:
        logger.info("old_log_files_removed", deleted_count=deleted)
    return deleted
