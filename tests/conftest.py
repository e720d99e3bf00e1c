"""
Shared fixtures.

Every test gets its own in-memory SQLite database. The API client shares
that database through a get_db override, so rows created with the `db`
fixture are visible to HTTP calls and vice versa.
"""

import os

# Keep the app from touching a real database file while importing main.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_CATEGORIES"] = "0"
os.environ["APP_PASSPHRASE"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base
from models import Category
from app.deps import get_db
from app.services.users import upsert_user


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    from main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def broken_db():
    """A session whose engine can never connect (missing directory)."""
    eng = create_engine("sqlite:////nonexistent-ledger-dir/ledger.db")
    session = sessionmaker(bind=eng)()
    try:
        yield session
    finally:
        session.close()
        eng.dispose()


@pytest.fixture
def categories(db):
    """A small category tree: two expense roots, one child, one income root."""
    food = Category(name="Food", kind="expense")
    rent = Category(name="Rent", kind="expense")
    salary = Category(name="Salary", kind="income")
    db.add_all([food, rent, salary])
    db.flush()

    fuel = Category(name="Fuel", kind="expense", parent_id=rent.id)
    db.add(fuel)
    db.commit()

    return {"food": food.id, "rent": rent.id, "salary": salary.id, "fuel": fuel.id}


@pytest.fixture
def owner(db):
    return upsert_user(db, open_id="alice", name="Alice").id


@pytest.fixture
def other_owner(db):
    return upsert_user(db, open_id="bob", name="Bob").id


@pytest.fixture
def auth(owner):
    return {"X-User-Id": str(owner)}
