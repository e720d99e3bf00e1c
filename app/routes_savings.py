"""
Savings ledger routes (savings per month, withdrawals, totals).
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.deps import get_db, get_owner_id
from app.schemas import (
    AffectedResponse,
    CreatedResponse,
    SavingCreate,
    SavingOut,
    SavingPatch,
    SavingsTotalsOut,
    WithdrawalCreate,
    WithdrawalOut,
)
from app.services import savings as savings_service

router = APIRouter(tags=["savings"])


@router.get("/savings", response_model=List[SavingOut])
def list_savings(owner_id: int = Depends(get_owner_id), db: Session = Depends(get_db)):
    return savings_service.list_savings(db, owner_id)


@router.get("/savings/totals", response_model=SavingsTotalsOut)
def savings_totals(owner_id: int = Depends(get_owner_id), db: Session = Depends(get_db)):
    return savings_service.get_savings_totals(db, owner_id)


@router.get("/savings/month/{month}", response_model=SavingOut)
def saving_for_month(
    month: str,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    saving = savings_service.get_saving_by_month(db, owner_id, month)
    if saving is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No savings for this month")
    return saving


@router.post("/savings", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_saving(
    payload: SavingCreate,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return {"id": savings_service.create_saving(db, owner_id, payload)}


@router.patch("/savings/{saving_id}", response_model=AffectedResponse)
def update_saving(
    saving_id: int,
    patch: SavingPatch,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return {"affected": savings_service.update_saving(db, saving_id, owner_id, patch)}


@router.delete("/savings/{saving_id}", response_model=AffectedResponse)
def delete_saving(
    saving_id: int,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return {"affected": savings_service.delete_saving(db, saving_id, owner_id)}


@router.get("/withdrawals", response_model=List[WithdrawalOut])
def list_withdrawals(owner_id: int = Depends(get_owner_id), db: Session = Depends(get_db)):
    return savings_service.list_withdrawals(db, owner_id)


@router.post("/withdrawals", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_withdrawal(
    payload: WithdrawalCreate,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return {"id": savings_service.create_withdrawal(db, owner_id, payload)}


@router.delete("/withdrawals/{withdrawal_id}", response_model=AffectedResponse)
def delete_withdrawal(
    withdrawal_id: int,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return {"affected": savings_service.delete_withdrawal(db, withdrawal_id, owner_id)}
