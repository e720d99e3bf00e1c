# app/services/transactions.py
"""
Transaction reads and owner-scoped mutations.

Every update/delete carries `user_id == owner_id` in its WHERE clause, so a
row owned by someone else behaves exactly like a missing row (0 affected).
"""

from datetime import datetime

from sqlalchemy.orm import Session

from models import Transaction
from app.log import get_logger
from app.schemas import TransactionCreate, TransactionPatch
from app.services.amounts import parse_instant, to_minor_units
from app.services.categories import require_category
from app.services.store_guard import read_or_default, write_guard

logger = get_logger(__name__)


def apply_date_range(query, column, start: datetime | None, end: datetime | None):
    """Closed range [start, end]; either bound may be omitted."""
    if start is not None:
        query = query.filter(column >= start)
    if end is not None:
        query = query.filter(column <= end)
    return query


@read_or_default([])
def list_transactions(
    db: Session,
    owner_id: int,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[Transaction]:
    query = db.query(Transaction).filter(Transaction.user_id == owner_id)
    query = apply_date_range(query, Transaction.transaction_date, start, end)
    return query.order_by(Transaction.transaction_date.desc(), Transaction.id.desc()).all()


def _warn_on_kind_mismatch(category, kind: str, transaction_id: int | None = None) -> None:
    # Tolerated, but worth surfacing: reports group on the transaction's kind.
    if category.kind != kind:
        logger.warning(
            "transaction_kind_mismatch",
            transaction_id=transaction_id,
            category_id=category.id,
            category_kind=category.kind,
            kind=kind,
        )


@write_guard("create_transaction")
def create_transaction(db: Session, owner_id: int, payload: TransactionCreate) -> int:
    # Normalize before touching the store
    amount = to_minor_units(payload.amount)
    transaction_date = parse_instant(payload.transaction_date)

    category = require_category(db, payload.category_id)
    _warn_on_kind_mismatch(category, payload.kind)

    tx = Transaction(
        user_id=owner_id,
        category_id=payload.category_id,
        amount=amount,
        kind=payload.kind,
        person=payload.person,
        description=payload.description,
        transaction_date=transaction_date,
    )
    db.add(tx)
    db.commit()
    db.refresh(tx)

    logger.info("transaction_created", transaction_id=tx.id, user_id=owner_id, amount=amount, kind=tx.kind)
    return tx.id


@write_guard("update_transaction")
def update_transaction(
    db: Session,
    transaction_id: int,
    owner_id: int,
    patch: TransactionPatch,
) -> int:
    """
    Apply only the fields present in `patch`; everything else is untouched.
    Returns the affected-row count (0 when missing or not owned).
    """
    fields = patch.present_fields()
    values = {}

    if "amount" in fields:
        values[Transaction.amount] = to_minor_units(patch.amount)
    if "transaction_date" in fields:
        values[Transaction.transaction_date] = parse_instant(patch.transaction_date)
    if "person" in fields:
        values[Transaction.person] = patch.person
    if "description" in fields:
        values[Transaction.description] = patch.description
    if "category_id" in fields:
        category = require_category(db, patch.category_id)
        stored_kind = (
            db.query(Transaction.kind)
            .filter(Transaction.id == transaction_id, Transaction.user_id == owner_id)
            .scalar()
        )
        if stored_kind is not None:
            _warn_on_kind_mismatch(category, stored_kind, transaction_id)
        values[Transaction.category_id] = patch.category_id

    values[Transaction.updated_at] = datetime.now()

    affected = (
        db.query(Transaction)
        .filter(Transaction.id == transaction_id, Transaction.user_id == owner_id)
        .update(values, synchronize_session=False)
    )
    db.commit()

    logger.info(
        "transaction_updated",
        transaction_id=transaction_id,
        user_id=owner_id,
        fields=sorted(fields),
        affected=affected,
    )
    return affected


@write_guard("delete_transaction")
def delete_transaction(db: Session, transaction_id: int, owner_id: int) -> int:
    affected = (
        db.query(Transaction)
        .filter(Transaction.id == transaction_id, Transaction.user_id == owner_id)
        .delete(synchronize_session=False)
    )
    db.commit()

    logger.info("transaction_deleted", transaction_id=transaction_id, user_id=owner_id, affected=affected)
    return affected
