"""
Structured logging configuration using structlog.
"""
import structlog
import logging
import sys
from typing import Any, Dict, Optional

from structlog.contextvars import bind_contextvars

from storefront.config import settings


def add_app_context(logger: Any, method_name: str, event_dict: Dict) -> Dict:
    """Add application context to log entries."""
    event_dict['app'] = 'manglanam-storefront'
    event_dict['version'] = settings.APP_VERSION
    event_dict['environment'] = settings.ENVIRONMENT
    return event_dict


def bind_order_context(order_id: Optional[str] = None, razorpay_order_id: Optional[str] = None) -> None:
    """
    Attach the store order (and its gateway reference, once known) to every
    log line emitted for the rest of the current request.
    """
    context = {}
    if order_id:
        context['order_id'] = order_id
    if razorpay_order_id:
        context['razorpay_order_id'] = razorpay_order_id
    if context:
        bind_contextvars(**context)


def configure_logging(json_logs: Optional[bool] = None):
    """Configure structlog with processors. JSON outside development, console text in it."""
    if json_logs is None:
        json_logs = not settings.DEBUG

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_logs:
        processors += [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
    )
    # Razorpay calls are logged by the client itself
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# Initialize logging
configure_logging()


def get_logger(name: str = __name__):
    """Get a structured logger instance."""
    return structlog.get_logger(name)
