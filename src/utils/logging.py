# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

Service modules log through ``logging.getLogger(__name__)`` with %-style
arguments. setup_logging() installs a structlog ProcessorFormatter on the
root logger, so those records are rendered with the service name, the
environment and whatever the request middleware bound with bind_context()
(request id, acting user). Output is JSON outside development and colored
console output in development.

Example:
    >>> import logging
    >>> from src.utils.logging import setup_logging, bind_context
    >>> from src.core.config import get_settings
    >>> setup_logging(get_settings())
    >>> bind_context(request_id="9b2f")
    >>> logging.getLogger("src.domains.distribution").info("Job done: id=%s", "123")
"""

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from src.core.config.settings import Settings

# Name of the root handler owned by setup_logging(); replaced on every call.
HANDLER_NAME = "fateh-structlog"


def service_fields(service: str, environment: str) -> Processor:
    """Build a processor stamping service and environment on every record."""

    def add_service_fields(
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("service", service)
        event_dict.setdefault("environment", environment)
        return event_dict

    return add_service_fields


def setup_logging(settings: "Settings") -> None:
    """Route standard library and structlog records through one renderer.

    Args:
        settings: Application settings (log level, environment, service
            name and the library loggers to quiet).
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        service_fields(settings.service_name, settings.environment),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    render_chain: list[Processor] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if settings.is_development:
        render_chain.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        render_chain += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=render_chain,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_level)

    for logger_name in settings.quiet_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def bind_context(**kwargs: object) -> None:
    """Bind values to every subsequent log record in the current context.

    Example:
        >>> bind_context(request_id="abc-123", user_id="user-456")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop all bound context values at the end of a request."""
    structlog.contextvars.clear_contextvars()
