# app/services/reports.py
"""
Aggregation queries behind the statistics and monthly report screens.

All totals are integer minor units. Every query filters on the owner and,
when given, the closed range [start, end] over transaction_date.
On store failure each read returns its empty default.
"""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from models import Transaction
from app.errors import ValidationError
from app.services.amounts import month_bounds, month_key_for, normalize_month_key
from app.services.store_guard import read_or_default
from app.services.transactions import apply_date_range

MIN_COMPARISON_MONTHS = 2
MAX_COMPARISON_MONTHS = 12


def _empty_balance() -> dict:
    return {"income": 0, "expense": 0, "balance": 0}


@read_or_default(_empty_balance())
def get_balance(
    db: Session,
    owner_id: int,
    start: datetime | None = None,
    end: datetime | None = None,
) -> dict:
    """
    Total income, total expense and their difference.
    A kind with no rows counts as zero.
    """
    query = (
        db.query(Transaction.kind, func.sum(Transaction.amount).label("total"))
        .filter(Transaction.user_id == owner_id)
    )
    query = apply_date_range(query, Transaction.transaction_date, start, end)
    rows = query.group_by(Transaction.kind).all()

    totals = {kind: int(total or 0) for kind, total in rows}
    income = totals.get("income", 0)
    expense = totals.get("expense", 0)

    return {"income": income, "expense": expense, "balance": income - expense}


@read_or_default([])
def get_spending_by_category(
    db: Session,
    owner_id: int,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[dict]:
    """
    Expense totals per category. Categories without spend are absent;
    callers treat a missing category as zero.
    """
    query = (
        db.query(Transaction.category_id, func.sum(Transaction.amount).label("total"))
        .filter(Transaction.user_id == owner_id, Transaction.kind == "expense")
    )
    query = apply_date_range(query, Transaction.transaction_date, start, end)
    rows = (
        query.group_by(Transaction.category_id)
        .order_by(func.sum(Transaction.amount).desc(), Transaction.category_id)
        .all()
    )

    return [{"category_id": r.category_id, "total": int(r.total or 0)} for r in rows]


def spending_map(spending: list[dict]) -> dict[int, int]:
    return {item["category_id"]: item["total"] for item in spending}


# ---- Month based reports ----

def get_monthly_summary(db: Session, owner_id: int, month: str) -> dict:
    """Balance plus category breakdown for one calendar month."""
    month = normalize_month_key(month)
    start, end = month_bounds(month)

    summary = {"month": month}
    summary.update(get_balance(db, owner_id, start, end))
    summary["by_category"] = get_spending_by_category(db, owner_id, start, end)
    return summary


def get_months_comparison(db: Session, owner_id: int, months: list[str]) -> list[dict]:
    """
    One monthly summary per requested key, in the order given.
    No cross-month deltas; the client derives those.
    """
    if not (MIN_COMPARISON_MONTHS <= len(months) <= MAX_COMPARISON_MONTHS):
        raise ValidationError(
            f"Comparison needs between {MIN_COMPARISON_MONTHS} and "
            f"{MAX_COMPARISON_MONTHS} months, got {len(months)}"
        )

    # Validate every key before running any query
    keys = [normalize_month_key(m) for m in months]
    return [get_monthly_summary(db, owner_id, key) for key in keys]


@read_or_default([])
def get_months_archive(db: Session, owner_id: int) -> list[str]:
    """Every month key with at least one transaction, most recent first."""
    rows = (
        db.query(Transaction.transaction_date)
        .filter(Transaction.user_id == owner_id)
        .all()
    )
    months = {month_key_for(r.transaction_date) for r in rows}
    return sorted(months, reverse=True)
