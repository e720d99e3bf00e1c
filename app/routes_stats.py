# app/routes_stats.py
"""
Statistics and monthly report endpoints (balance, category breakdown,
month summaries, archive, comparison).
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.deps import DateRange, get_db, get_owner_id
from app.schemas import BalanceOut, CategoryTotalOut, MonthlySummaryOut
from app.services import reports

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/balance", response_model=BalanceOut)
def balance(
    date_range: DateRange = Depends(),
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return reports.get_balance(db, owner_id, date_range.start, date_range.end)


@router.get("/by-category", response_model=List[CategoryTotalOut])
def by_category(
    date_range: DateRange = Depends(),
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return reports.get_spending_by_category(db, owner_id, date_range.start, date_range.end)


@router.get("/archive", response_model=List[str])
def months_archive(
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Month keys that have data, most recent first."""
    return reports.get_months_archive(db, owner_id)


@router.get("/comparison", response_model=List[MonthlySummaryOut])
def months_comparison(
    months: List[str] = Query(...),
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """One summary per ?months=YYYY-MM value, in the order given (2-12 months)."""
    return reports.get_months_comparison(db, owner_id, months)


@router.get("/monthly/{month}", response_model=MonthlySummaryOut)
def monthly_summary(
    month: str,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return reports.get_monthly_summary(db, owner_id, month)
