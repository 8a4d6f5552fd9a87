# chaircare/core/logging_config.py
import logging
import sys

import structlog

from chaircare.core.settings import get_settings


def setup_logging() -> None:
    """
    Configure structlog on top of stdlib logging.

    Every event is rendered as one JSON line on stdout. Request-scoped
    fields (request_id, endpoint, method) come from structlog's contextvars,
    see bind_request_context().
    """
    level = getattr(logging, get_settings().log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", key="ts"),
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def bind_request_context(request_id: str, **fields) -> None:
    """Reset the per-request log context and bind request_id (plus extra fields)."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **fields)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


# gedeelde logger voor de hele service
logger = structlog.get_logger("chaircare")
