"""Session ID logging context for tracing a conversation across modules.

Provides a session-aware logger that attaches the current session ID to
every log record, making it easy to follow one guest's reservation
dialogue through the engine, the store, and the storage adapters.

Usage:
    from reservation_bot.logging_context import get_session_logger, set_session_id

    set_session_id("web-4f2a")
    logger = get_session_logger(__name__)
    logger.info("Processing turn")  # record.session_id == "web-4f2a"
"""

import logging
from contextvars import ContextVar, Token

_session_id: ContextVar[str] = ContextVar("session_id", default="-")


def set_session_id(session_id: str) -> Token:
    """Set the session ID for the current async context."""
    return _session_id.set(session_id)


def reset_session_id(token: Token) -> None:
    """Restore the session ID that was active before ``set_session_id``."""
    _session_id.reset(token)


def get_session_id() -> str:
    """Retrieve the current session ID."""
    return _session_id.get()


class SessionIdFilter(logging.Filter):
    """Injects session_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = _session_id.get()  # type: ignore[attr-defined]
        return True


def install_session_filter() -> None:
    """Attach a SessionIdFilter to every root handler.

    Handler-level filters see records propagated from all loggers, so
    formatters on those handlers can always use ``%(session_id)s``.
    """
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, SessionIdFilter) for f in handler.filters):
            handler.addFilter(SessionIdFilter())


def get_session_logger(name: str) -> logging.Logger:
    """Return a logger with the SessionIdFilter attached."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, SessionIdFilter) for f in logger.filters):
        logger.addFilter(SessionIdFilter())
    return logger
