# app/deps.py
# Role: Shared request-level dependencies.
#       Provides the SQLAlchemy session dependency, the passphrase gate,
#       owner resolution, and date-range query parsing.

"""
Shared dependencies for the ledger API.
"""

import hmac
from datetime import datetime
from typing import Generator

from fastapi import Depends, Header, HTTPException, Query, status
from sqlalchemy.orm import Session

import config
from db import SessionLocal
from app.services.amounts import parse_instant

# -------------------------------------------------------------------
# Database dependency
# -------------------------------------------------------------------

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session and ensures it is closed.

    Typical usage in routes:
        db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# -------------------------------------------------------------------
# Session gate
# -------------------------------------------------------------------

def passphrase_matches(candidate: str | None) -> bool:
    """True when the gate is disabled or `candidate` equals APP_PASSPHRASE."""
    expected = config.APP_PASSPHRASE
    if not expected:
        return True
    return hmac.compare_digest((candidate or "").encode(), expected.encode())


def require_passphrase(x_passphrase: str | None = Header(None)) -> None:
    if not passphrase_matches(x_passphrase):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid passphrase",
        )


def get_owner_id(
    x_user_id: int | None = Header(None),
    _gate: None = Depends(require_passphrase),
) -> int:
    """
    Resolve the caller's owner id (as returned by POST /auth/login).

    Services only ever see this already-resolved id.
    """
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in",
        )
    return x_user_id


# -------------------------------------------------------------------
# Query helpers
# -------------------------------------------------------------------

class DateRange:
    """Optional closed [start_date, end_date] range from query parameters."""

    def __init__(
        self,
        start_date: str | None = Query(None),
        end_date: str | None = Query(None),
    ):
        self.start: datetime | None = parse_instant(start_date) if start_date else None
        self.end: datetime | None = parse_instant(end_date) if end_date else None
