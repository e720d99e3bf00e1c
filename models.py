# models.py
# Role: SQLAlchemy ORM models for the household ledger domain.
#       Users, shared categories, owner-scoped transactions and budgets,
#       plus the savings / withdrawals side ledger.

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Text, Enum, ForeignKey

from db import Base

ENTRY_KINDS = ("income", "expense")
ACCOUNT_TYPES = ("cash", "bank")
USER_ROLES = ("user", "admin")


class User(Base):
    """
    Identity anchor for every owned row.

    Rows are created or touched through an upsert keyed on open_id
    (see app/services/users.py) and are never hard-deleted.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    open_id = Column(String(64), nullable=False, unique=True)
    name = Column(Text, nullable=True)
    email = Column(String(320), nullable=True)
    login_method = Column(String(64), nullable=True)
    role = Column(Enum(*USER_ROLES, name="user_role"), nullable=False, default="user")
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)
    last_signed_in = Column(DateTime, nullable=False, default=datetime.now)


class Category(Base):
    """
    Shared classification for transactions and budgets.

    parent_id allows exactly one level of nesting; the service layer
    rejects deeper chains.
    """

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    kind = Column(Enum(*ENTRY_KINDS, name="entry_kind"), nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True)

    # Display metadata for the client (icon name, hex colour)
    icon = Column(String(50), nullable=True)
    color = Column(String(20), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.now)


class Transaction(Base):
    """
    One income or expense event.

    amount is always positive and stored in minor units (cents);
    direction is carried by kind.
    """

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    kind = Column(Enum(*ENTRY_KINDS, name="entry_kind"), nullable=False)

    # Person responsible for the transaction
    person = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)

    # Economic date (what reports bucket on), not the row creation time
    transaction_date = Column(DateTime, nullable=False, index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


class Budget(Base):
    """
    Monthly spending cap for one category, or for all expenses when
    category_id is NULL. Nothing enforces one budget per scope/month.
    """

    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    amount = Column(Integer, nullable=False)

    # Format: YYYY-MM
    month = Column(String(7), nullable=False, index=True)

    # Alert when spending reaches this percentage of the limit
    alert_threshold = Column(Integer, nullable=False, default=80)

    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


class Saving(Base):
    """Money set aside for a month, in minor units."""

    __tablename__ = "savings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    account_type = Column(Enum(*ACCOUNT_TYPES, name="account_type"), nullable=False, default="cash")
    month = Column(String(7), nullable=False)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


class SavingsWithdrawal(Base):
    """Money drawn down from savings on a given date, in minor units."""

    __tablename__ = "savings_withdrawals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    account_type = Column(Enum(*ACCOUNT_TYPES, name="account_type"), nullable=False, default="cash")
    withdrawal_date = Column(DateTime, nullable=False)
    reason = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
