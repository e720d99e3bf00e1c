# db.py
# Role: Database bootstrap for the household ledger.
#       Defines the SQLAlchemy engine, session factory, and declarative Base.

"""
Database setup for the household ledger.

- Uses DATABASE_URL from config (SQLite file under <project_root>/database by default).
- The engine's pool connects lazily on first use and is reused across requests.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from config import DATABASE_URL


def build_engine(url: str, **kwargs):
    """
    Create an engine for the given URL.

    SQLite needs check_same_thread=False because FastAPI serves
    sync routes from a thread pool.
    """
    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        kwargs["connect_args"] = connect_args
    return create_engine(url, **kwargs)


engine = build_engine(DATABASE_URL)

# Standard session factory used via dependency injection (see app/deps.py:get_db)
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Declarative base class for ORM models
Base = declarative_base()
