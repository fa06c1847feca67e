"""Structured logging setup for sectionist."""

import structlog
from pathlib import Path
from typing import Any
import os


def configure_logging() -> None:
    """
    Configure structlog for JSON logging to ~/.cache/sectionist/logs/sectionist.log.

    Log level can be controlled via SECTIONIST_LOG_LEVEL environment variable:
    - Set to "DEBUG" to see every state commit and id resolution
    - Defaults to "INFO" if not set

    Log levels:
    - DEBUG: Store commits, no-op edits, id prefix resolution
    - INFO: Editor operations and step transitions
    - WARNING: Rejected operations (empty selection, missing target, ...)
    - ERROR: Invariant violations, state file failures

    Example:
        SECTIONIST_LOG_LEVEL=DEBUG sectionist status

        # View logs with jq for readability:
        tail -f ~/.cache/sectionist/logs/sectionist.log | jq .
    """
    log_dir = Path.home() / ".cache" / "sectionist" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "sectionist.log"

    log_level = os.environ.get("SECTIONIST_LOG_LEVEL", "INFO").upper()

    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
    if log_level not in valid_levels:
        log_level = "INFO"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=open(log_file, "a")),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)

    Returns:
        Structured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("paragraph_added", paragraph_id="paragraph-1f3a")
    """
    return structlog.get_logger(name)
