# app/services/store_guard.py
"""
Store availability handling.

Every service function takes the session as its first argument.
Reads degrade to an empty default so the client can render a "no data"
state; writes roll back and raise StoreUnavailableError.
"""

import copy
import functools

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session

from app.errors import StoreUnavailableError
from app.log import get_logger

STORE_ERRORS = (OperationalError, InterfaceError)

logger = get_logger(__name__)


def _safe_rollback(db: Session) -> None:
    try:
        db.rollback()
    except STORE_ERRORS:
        pass


def read_or_default(default):
    """
    Decorator for read queries: on a connectivity/config failure, log and
    return a fresh copy of `default` instead of raising.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(db: Session, *args, **kwargs):
            try:
                return func(db, *args, **kwargs)
            except STORE_ERRORS as e:
                _safe_rollback(db)
                logger.warning("store_read_degraded", query=func.__name__, error=str(e))
                return copy.deepcopy(default)

        return wrapper

    return decorator


def write_guard(action: str):
    """
    Decorator for mutations: store failures anywhere in the body (including
    pre-write lookups and the commit) become StoreUnavailableError.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(db: Session, *args, **kwargs):
            try:
                return func(db, *args, **kwargs)
            except STORE_ERRORS as e:
                _safe_rollback(db)
                logger.error("store_write_failed", action=action, error=str(e))
                raise StoreUnavailableError(f"Database not available: {action} failed") from e

        return wrapper

    return decorator
