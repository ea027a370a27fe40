"""Structured logging setup for thnk."""

import atexit
import os
from pathlib import Path
from typing import Any, Optional

import structlog


DEFAULT_LOG_FILE = Path.home() / ".cache" / "thnk" / "logs" / "thnk.log"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def resolve_log_level(level: Optional[str] = None) -> str:
    """
    Pick the effective log level.

    An explicit level (the CLI's ``--log-level``) wins over THNK_LOG_LEVEL.
    Unknown names fall back to INFO.
    """
    level = (level or os.environ.get("THNK_LOG_LEVEL", "INFO")).upper()
    return level if level in LOG_LEVELS else "INFO"


def configure_logging(level: Optional[str] = None, log_file: Optional[Path] = None) -> Path:
    """
    Configure structlog to append JSON lines to the thnk log file.

    Args:
        level: DEBUG, INFO, WARNING or ERROR (default: THNK_LOG_LEVEL, else INFO)
        log_file: Destination (default: ~/.cache/thnk/logs/thnk.log)

    Returns:
        Path of the file being written

    Log levels:
    - DEBUG: Request payloads, raw response text, extracted JSON spans
    - INFO: Analysis started/completed, provider selection
    - WARNING: Retry attempts, fallback results
    - ERROR: Terminal request failures

    Example:
        thnk --log-level debug analyze "rough day at work"
        tail -f ~/.cache/thnk/logs/thnk.log | jq .
    """
    log_file = log_file or DEFAULT_LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)

    handle = open(log_file, "a", encoding="utf-8")
    atexit.register(handle.close)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_log_level(level)),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=handle),
        cache_logger_on_first_use=True,
    )
    return log_file


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("analysis_started", provider="anthropic")
    """
    return structlog.get_logger(name)
