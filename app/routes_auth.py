"""
Passphrase sign-in and the current-user lookup.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import config
from app.deps import get_db, get_owner_id, passphrase_matches
from app.schemas import LoginRequest, LoginResponse, UserOut
from app.services.users import get_user, upsert_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """
    Check the shared passphrase and upsert the household user.
    The returned user_id goes into the X-User-Id header of later calls.
    """
    if not passphrase_matches(payload.passphrase):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid passphrase",
        )

    user = upsert_user(
        db,
        open_id=payload.open_id or config.DEFAULT_OPEN_ID,
        name=payload.name,
        email=payload.email,
        login_method="passphrase",
    )
    return {"user_id": user.id, "open_id": user.open_id}


@router.get("/me", response_model=UserOut)
def me(
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    user = get_user(db, owner_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user
