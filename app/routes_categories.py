"""
Category routes. Categories are shared, so only the passphrase gate applies.
"""

from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.deps import get_db, require_passphrase
from app.schemas import AffectedResponse, CategoryCreate, CategoryOut, CategoryPatch, CreatedResponse
from app.services import categories as category_service

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
    dependencies=[Depends(require_passphrase)],
)


@router.get("", response_model=List[CategoryOut])
def list_categories(
    kind: Literal["income", "expense"] | None = Query(None),
    db: Session = Depends(get_db),
):
    return category_service.list_categories(db, kind)


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, db: Session = Depends(get_db)):
    category = category_service.get_category(db, category_id)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    return {"id": category_service.create_category(db, payload)}


@router.patch("/{category_id}", response_model=AffectedResponse)
def update_category(category_id: int, patch: CategoryPatch, db: Session = Depends(get_db)):
    return {"affected": category_service.update_category(db, category_id, patch)}


@router.delete("/{category_id}", response_model=AffectedResponse)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    return {"affected": category_service.delete_category(db, category_id)}
