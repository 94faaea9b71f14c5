"""
StaffPlan Structured Logging

The API layer logs through structlog; storage and the allocation service use
plain `logging.getLogger(__name__)`. Both end up in one stdout handler whose
structlog ProcessorFormatter renders JSON in production and coloured console
lines elsewhere, so a request's method and path (bound per request with
`bind_request_context`) appear on every line it produces.
"""

import logging
import sys
from typing import Any, Optional

import structlog

from staffplan.platform.config import settings

_handler: Optional[logging.Handler] = None

_shared_processors = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
]


def _renderer_chain(json_logs: bool) -> list:
    if json_logs:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=settings.DEBUG)]


def configure_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """Route structlog and stdlib records through a single formatter."""
    global _handler

    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    if json_logs is None:
        json_logs = settings.APP_ENV == "production"

    structlog.configure(
        processors=_shared_processors + [
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_shared_processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta]
            + _renderer_chain(json_logs),
        )
    )

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    root.addHandler(handler)
    root.setLevel(log_level)
    _handler = handler


def bind_request_context(**values: Any) -> None:
    """Start a fresh per-request logging context."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)
