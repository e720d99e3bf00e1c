from datetime import datetime

from sqlalchemy.orm import Session

from models import User
from app.errors import ValidationError
from app.log import get_logger
from app.services.store_guard import write_guard

logger = get_logger(__name__)


@write_guard("upsert_user")
def upsert_user(
    db: Session,
    open_id: str,
    name: str | None = None,
    email: str | None = None,
    login_method: str | None = None,
) -> User:
    """
    Insert the user keyed on open_id, or touch the existing row.

    Existing rows get last_signed_in/updated_at refreshed; name, email and
    login_method are only overwritten when provided.
    """
    open_id = (open_id or "").strip()
    if not open_id:
        raise ValidationError("open_id is required")

    now = datetime.now()
    user = db.query(User).filter(User.open_id == open_id).first()

    if user is None:
        user = User(
            open_id=open_id,
            name=name,
            email=email,
            login_method=login_method,
            created_at=now,
            updated_at=now,
            last_signed_in=now,
        )
        db.add(user)
        created = True
    else:
        if name is not None:
            user.name = name
        if email is not None:
            user.email = email
        if login_method is not None:
            user.login_method = login_method
        user.last_signed_in = now
        user.updated_at = now
        created = False

    db.commit()
    db.refresh(user)

    logger.info("user_upserted", user_id=user.id, created=created)
    return user


def get_user(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()
