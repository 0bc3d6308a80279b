import logging
import time
from functools import wraps

from flask import current_app
from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError

from gamava.extensions import db

logger = logging.getLogger(__name__)

RETRYABLE_MESSAGES = (
    "connection terminated unexpectedly",
    "connection terminated due to connection timeout",
    "client has encountered a connection error",
    "timeout",
    "terminating connection due to administrator command",
    "server closed the connection unexpectedly",
    "connection to server was lost",
    "connection was reset",
    "database connection lost",
    "database system is shutting down",
    "database system is starting up",
)

# admin_shutdown, connection_failure, connection_exception,
# connection_does_not_exist, too_many_connections, insufficient_resources
RETRYABLE_PGCODES = ("57P01", "08006", "08000", "08003", "53300", "53400")


def is_retryable_error(error) -> bool:
    """True for transient connection-level failures only"""
    if isinstance(error, DisconnectionError):
        return True
    if not isinstance(error, (OperationalError, InterfaceError)):
        return False
    if getattr(error, "connection_invalidated", False):
        return True

    pgcode = getattr(getattr(error, "orig", None), "pgcode", None)
    if pgcode in RETRYABLE_PGCODES:
        return True

    message = str(error).lower()
    return any(text in message for text in RETRYABLE_MESSAGES)


def backoff_delay(attempt: int, base: float, maximum: float) -> float:
    return min(base * (2 ** attempt), maximum)


def with_db_retry(fn):
    """Retry a unit of DB work on transient connection errors with exponential backoff.

    The session is rolled back before each new attempt, so the wrapped function
    must be safe to re-run from the start.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        retries = current_app.config.get("DB_QUERY_RETRIES", 2)
        base = current_app.config.get("DB_RETRY_BASE_DELAY", 1.0)
        maximum = current_app.config.get("DB_RETRY_MAX_DELAY", 5.0)

        attempt = 0
        while True:
            try:
                return fn(*args, **kwargs)
            except (OperationalError, InterfaceError, DisconnectionError) as e:
                db.session.rollback()
                if attempt >= retries or not is_retryable_error(e):
                    logger.error(f"{fn.__name__} failed after {attempt + 1} attempt(s): {e}")
                    raise
                wait = backoff_delay(attempt, base, maximum)
                logger.warning(
                    f"{fn.__name__} attempt {attempt + 1} failed, retrying in {wait:.1f}s: {e}"
                )
                time.sleep(wait)
                attempt += 1
    return wrapper
