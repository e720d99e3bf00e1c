# app/services/savings.py
"""
Savings side ledger: money put aside per month and withdrawals from it.
Same conventions as transactions (minor units, owner-scoped mutations).
"""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from models import Saving, SavingsWithdrawal
from app.log import get_logger
from app.schemas import SavingCreate, SavingPatch, WithdrawalCreate
from app.services.amounts import normalize_month_key, parse_instant, to_minor_units
from app.services.store_guard import read_or_default, write_guard

logger = get_logger(__name__)


# ---- Savings ----

@read_or_default([])
def list_savings(db: Session, owner_id: int) -> list[Saving]:
    return (
        db.query(Saving)
        .filter(Saving.user_id == owner_id)
        .order_by(Saving.month.desc(), Saving.id.desc())
        .all()
    )


@read_or_default(None)
def get_saving_by_month(db: Session, owner_id: int, month: str) -> Saving | None:
    month = normalize_month_key(month)
    return (
        db.query(Saving)
        .filter(Saving.user_id == owner_id, Saving.month == month)
        .order_by(Saving.id)
        .first()
    )


@write_guard("create_saving")
def create_saving(db: Session, owner_id: int, payload: SavingCreate) -> int:
    saving = Saving(
        user_id=owner_id,
        amount=to_minor_units(payload.amount),
        account_type=payload.account_type,
        month=normalize_month_key(payload.month),
        note=payload.note,
    )
    db.add(saving)
    db.commit()
    db.refresh(saving)

    logger.info("saving_created", saving_id=saving.id, user_id=owner_id, month=saving.month)
    return saving.id


@write_guard("update_saving")
def update_saving(db: Session, saving_id: int, owner_id: int, patch: SavingPatch) -> int:
    fields = patch.present_fields()
    values = {}

    if "amount" in fields:
        values[Saving.amount] = to_minor_units(patch.amount)
    if "month" in fields:
        values[Saving.month] = normalize_month_key(patch.month)
    if "account_type" in fields:
        values[Saving.account_type] = patch.account_type
    if "note" in fields:
        values[Saving.note] = patch.note

    values[Saving.updated_at] = datetime.now()

    affected = (
        db.query(Saving)
        .filter(Saving.id == saving_id, Saving.user_id == owner_id)
        .update(values, synchronize_session=False)
    )
    db.commit()

    logger.info("saving_updated", saving_id=saving_id, user_id=owner_id, affected=affected)
    return affected


@write_guard("delete_saving")
def delete_saving(db: Session, saving_id: int, owner_id: int) -> int:
    affected = (
        db.query(Saving)
        .filter(Saving.id == saving_id, Saving.user_id == owner_id)
        .delete(synchronize_session=False)
    )
    db.commit()

    logger.info("saving_deleted", saving_id=saving_id, user_id=owner_id, affected=affected)
    return affected


# ---- Withdrawals ----

@read_or_default([])
def list_withdrawals(db: Session, owner_id: int) -> list[SavingsWithdrawal]:
    return (
        db.query(SavingsWithdrawal)
        .filter(SavingsWithdrawal.user_id == owner_id)
        .order_by(SavingsWithdrawal.withdrawal_date.desc(), SavingsWithdrawal.id.desc())
        .all()
    )


@write_guard("create_withdrawal")
def create_withdrawal(db: Session, owner_id: int, payload: WithdrawalCreate) -> int:
    withdrawal = SavingsWithdrawal(
        user_id=owner_id,
        amount=to_minor_units(payload.amount),
        account_type=payload.account_type,
        withdrawal_date=parse_instant(payload.withdrawal_date),
        reason=payload.reason,
    )
    db.add(withdrawal)
    db.commit()
    db.refresh(withdrawal)

    logger.info("withdrawal_created", withdrawal_id=withdrawal.id, user_id=owner_id)
    return withdrawal.id


@write_guard("delete_withdrawal")
def delete_withdrawal(db: Session, withdrawal_id: int, owner_id: int) -> int:
    affected = (
        db.query(SavingsWithdrawal)
        .filter(SavingsWithdrawal.id == withdrawal_id, SavingsWithdrawal.user_id == owner_id)
        .delete(synchronize_session=False)
    )
    db.commit()

    logger.info("withdrawal_deleted", withdrawal_id=withdrawal_id, user_id=owner_id, affected=affected)
    return affected


# ---- Totals ----

@read_or_default({"total_savings": 0, "total_withdrawals": 0, "balance": 0})
def get_savings_totals(db: Session, owner_id: int) -> dict:
    total_savings = (
        db.query(func.coalesce(func.sum(Saving.amount), 0))
        .filter(Saving.user_id == owner_id)
        .scalar()
        or 0
    )
    total_withdrawals = (
        db.query(func.coalesce(func.sum(SavingsWithdrawal.amount), 0))
        .filter(SavingsWithdrawal.user_id == owner_id)
        .scalar()
        or 0
    )

    total_savings = int(total_savings)
    total_withdrawals = int(total_withdrawals)
    return {
        "total_savings": total_savings,
        "total_withdrawals": total_withdrawals,
        "balance": total_savings - total_withdrawals,
    }
