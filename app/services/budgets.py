# app/services/budgets.py
"""
Monthly budgets and their evaluation against actual spending.

A budget without category_id caps *all* expenses for the month.
Several budgets may exist for the same scope and month; each one is
evaluated on its own against the same spend.
"""

from datetime import datetime
from typing import Iterable

from sqlalchemy.orm import Session

from models import Budget
from app.errors import ValidationError
from app.log import get_logger
from app.schemas import BudgetCreate, BudgetPatch
from app.services.amounts import month_bounds, normalize_month_key, to_minor_units
from app.services.categories import require_category
from app.services.reports import get_spending_by_category, spending_map
from app.services.store_guard import read_or_default, write_guard

logger = get_logger(__name__)

BUDGET_FIELDS = ("id", "user_id", "category_id", "amount", "month", "alert_threshold", "created_at", "updated_at")


# ---- Evaluation ----

def budget_percentage(spent: int, limit: int) -> float:
    """spent / limit * 100, defined as 0 for a zero limit."""
    if limit == 0:
        return 0.0
    # multiply first: 800 of 1000 is exactly 80.0
    return spent * 100 / limit


def evaluate_budget(budget, spending: dict[int, int]) -> dict:
    """
    Status of one budget given {category_id: spent} for its month.

    is_near_limit covers alert_threshold <= percentage <= 100;
    anything above 100 is over budget instead.
    """
    if budget.category_id is None:
        spent = sum(spending.values())
    else:
        spent = spending.get(budget.category_id, 0)

    percentage = budget_percentage(spent, budget.amount)

    status = {name: getattr(budget, name, None) for name in BUDGET_FIELDS}
    status.update(
        spent=spent,
        percentage=percentage,
        display_percentage=min(percentage, 100.0),
        is_over_budget=percentage > 100,
        is_near_limit=budget.alert_threshold <= percentage <= 100,
    )
    return status


def evaluate_budgets(budgets: Iterable, spending) -> list[dict]:
    """
    Evaluate every budget against the same spending result.

    `spending` is either the list returned by get_spending_by_category or
    an already-built {category_id: total} mapping.
    """
    if not isinstance(spending, dict):
        spending = spending_map(spending)
    return [evaluate_budget(b, spending) for b in budgets]


# ---- Reads ----

@read_or_default([])
def list_budgets(db: Session, owner_id: int, month: str) -> list[Budget]:
    month = normalize_month_key(month)
    return (
        db.query(Budget)
        .filter(Budget.user_id == owner_id, Budget.month == month)
        .order_by(Budget.category_id.is_not(None), Budget.category_id, Budget.id)
        .all()
    )


@read_or_default([])
def list_all_budgets(db: Session, owner_id: int) -> list[Budget]:
    return (
        db.query(Budget)
        .filter(Budget.user_id == owner_id)
        .order_by(Budget.month.desc(), Budget.id)
        .all()
    )


def get_budget_status(db: Session, owner_id: int, month: str) -> list[dict]:
    """Budgets of `month` joined against that month's expense spending."""
    month = normalize_month_key(month)
    start, end = month_bounds(month)

    budgets = list_budgets(db, owner_id, month)
    spending = get_spending_by_category(db, owner_id, start, end)
    return evaluate_budgets(budgets, spending)


# ---- Mutations ----

@write_guard("create_budget")
def create_budget(db: Session, owner_id: int, payload: BudgetCreate) -> int:
    amount = to_minor_units(payload.amount)
    month = normalize_month_key(payload.month)

    threshold = payload.alert_threshold
    if not (0 <= threshold <= 100):
        raise ValidationError("alert_threshold must be between 0 and 100")

    if payload.category_id is not None:
        category = require_category(db, payload.category_id)
        if category.kind != "expense":
            raise ValidationError("Budgets can only limit expense categories")

    budget = Budget(
        user_id=owner_id,
        category_id=payload.category_id,
        amount=amount,
        month=month,
        alert_threshold=threshold,
    )
    db.add(budget)
    db.commit()
    db.refresh(budget)

    logger.info("budget_created", budget_id=budget.id, user_id=owner_id, month=month, amount=amount)
    return budget.id


@write_guard("update_budget")
def update_budget(db: Session, budget_id: int, owner_id: int, patch: BudgetPatch) -> int:
    fields = patch.present_fields()
    values = {}

    if "amount" in fields:
        values[Budget.amount] = to_minor_units(patch.amount)
    if "alert_threshold" in fields:
        values[Budget.alert_threshold] = patch.alert_threshold

    values[Budget.updated_at] = datetime.now()

    affected = (
        db.query(Budget)
        .filter(Budget.id == budget_id, Budget.user_id == owner_id)
        .update(values, synchronize_session=False)
    )
    db.commit()

    logger.info("budget_updated", budget_id=budget_id, user_id=owner_id, fields=sorted(fields), affected=affected)
    return affected


@write_guard("delete_budget")
def delete_budget(db: Session, budget_id: int, owner_id: int) -> int:
    affected = (
        db.query(Budget)
        .filter(Budget.id == budget_id, Budget.user_id == owner_id)
        .delete(synchronize_session=False)
    )
    db.commit()

    logger.info("budget_deleted", budget_id=budget_id, user_id=owner_id, affected=affected)
    return affected
