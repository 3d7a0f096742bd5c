"""Structured logging configuration for applint."""

import logging
import sys
from typing import Any, Dict, Optional

import structlog
from structlog.types import Processor

from .config import get_settings


def setup_logging() -> None:
    """Configure structured logging for applint.

    Logs go to stderr; stdout is reserved for workflow commands.
    """
    settings = get_settings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=settings.log_level.upper(),
        force=True,
    )

    # Configure structlog
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def log_pipeline_event(
    logger: structlog.stdlib.BoundLogger,
    run_id: str,
    phase: str,
    base: Optional[str] = None,
    head: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """Log a pipeline event with run context."""
    log_data: Dict[str, Any] = {
        "run_id": run_id,
        "phase": phase,
    }

    if base is not None:
        log_data["base"] = base
    if head is not None:
        log_data["head"] = head

    log_data.update(kwargs)

    logger.info(f"pipeline.{phase}", **log_data)


def log_api_call(
    logger: structlog.stdlib.BoundLogger,
    operation: str,
    status: int,
    **kwargs: Any,
) -> None:
    """Log a platform API call."""
    log_data: Dict[str, Any] = {
        "api_operation": operation,
        "status_code": status,
    }
    log_data.update(kwargs)

    if 200 <= status < 300:
        logger.debug("api.call", **log_data)
    else:
        logger.warning("api.call", **log_data)


# Initialize logging on module import
setup_logging()
