import logging
from functools import wraps

from gamava.extensions import db
from gamava.exceptions import SyncError

logger = logging.getLogger(__name__)


def best_effort_sync(fn):
    """Run a projection step; failures are logged and swallowed.

    The primary write that triggered the projection has already been committed,
    so a failure here leaves the projection stale until the next sync.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except Exception as e:
            db.session.rollback()
            error = SyncError(f"{fn.__name__} failed: {e}")
            logger.error(error.message, exc_info=True)
            return None
    return wrapper
