"""
Budget routes: monthly caps and their status against actual spending.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.deps import get_db, get_owner_id
from app.schemas import (
    AffectedResponse,
    BudgetCreate,
    BudgetOut,
    BudgetPatch,
    BudgetStatusOut,
    CreatedResponse,
)
from app.services import budgets as budget_service

router = APIRouter(prefix="/budgets", tags=["budgets"])


@router.get("", response_model=List[BudgetOut])
def list_budgets(
    month: str = Query(..., description="YYYY-MM"),
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return budget_service.list_budgets(db, owner_id, month)


@router.get("/status", response_model=List[BudgetStatusOut])
def budget_status(
    month: str = Query(..., description="YYYY-MM"),
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Spent / percentage / alert flags for every budget of the month."""
    return budget_service.get_budget_status(db, owner_id, month)


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_budget(
    payload: BudgetCreate,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return {"id": budget_service.create_budget(db, owner_id, payload)}


@router.patch("/{budget_id}", response_model=AffectedResponse)
def update_budget(
    budget_id: int,
    patch: BudgetPatch,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return {"affected": budget_service.update_budget(db, budget_id, owner_id, patch)}


@router.delete("/{budget_id}", response_model=AffectedResponse)
def delete_budget(
    budget_id: int,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return {"affected": budget_service.delete_budget(db, budget_id, owner_id)}
