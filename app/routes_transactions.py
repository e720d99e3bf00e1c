"""
Routes for listing and mutating the caller's transactions.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.deps import DateRange, get_db, get_owner_id
from app.schemas import (
    AffectedResponse,
    CreatedResponse,
    TransactionCreate,
    TransactionOut,
    TransactionPatch,
)
from app.services import transactions as tx_service

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=List[TransactionOut])
def list_transactions(
    date_range: DateRange = Depends(),
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Transactions in the optional range, newest economic date first."""
    return tx_service.list_transactions(db, owner_id, date_range.start, date_range.end)


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_transaction(
    payload: TransactionCreate,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return {"id": tx_service.create_transaction(db, owner_id, payload)}


@router.patch("/{transaction_id}", response_model=AffectedResponse)
def update_transaction(
    transaction_id: int,
    patch: TransactionPatch,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """
    Partial update: only fields present in the body change.
    affected == 0 means the id is unknown or belongs to someone else.
    """
    return {"affected": tx_service.update_transaction(db, transaction_id, owner_id, patch)}


@router.delete("/{transaction_id}", response_model=AffectedResponse)
def delete_transaction(
    transaction_id: int,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return {"affected": tx_service.delete_transaction(db, transaction_id, owner_id)}
