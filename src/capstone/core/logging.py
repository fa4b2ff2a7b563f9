"""structlog setup and request-scoped log context."""

import logging
import sys
from uuid import UUID

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

from src.capstone.core import config

# Libraries that log every statement at INFO
_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncpg")


def setup_logging(debug: bool | None = None) -> None:
    """Configure structlog on top of stdlib logging.

    Debug mode renders coloured console lines; otherwise every event is a
    JSON object. ``debug`` defaults to the ``debug`` setting.
    """
    if debug is None:
        debug = config.get_settings().debug

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None) -> None:
    """Attach the caller's correlation id to every following log event."""
    if request_id:
        bind_contextvars(request_id=request_id)


def bind_actor_context(user_id: UUID, role: str, email: str | None = None) -> None:
    """Attach the acting user to every following log event.

    The email is only bound when ``log_user_emails`` is enabled.
    """
    bind_contextvars(user_id=str(user_id), user_role=role)
    if email and config.get_settings().log_user_emails:
        bind_contextvars(user_email=email)


def clear_request_context() -> None:
    clear_contextvars()
