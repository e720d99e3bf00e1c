# app/services/categories.py
"""
Category management.

Categories are shared by the whole household (no owner column).
Nesting is limited to one level: a subcategory's parent must be a root
category, and a category that already has children cannot become one.
"""

from sqlalchemy.orm import Session

from models import Category, Transaction
from app.errors import ReferentialConflictError, ValidationError
from app.log import get_logger
from app.schemas import CategoryCreate, CategoryPatch
from app.services.store_guard import read_or_default, write_guard

logger = get_logger(__name__)


# Default household tree: (name, kind, icon, color, [subcategory names])
DEFAULT_CATEGORIES = [
    ("Salary", "income", "Wallet", "#10b981", []),
    ("Extra income", "income", "TrendingUp", "#3b82f6", []),
    ("Side projects", "income", "Briefcase", "#8b5cf6", []),
    ("Bonus", "income", "Gift", "#f59e0b", []),
    ("Investments", "income", "LineChart", "#06b6d4", []),
    ("Other income", "income", "Plus", "#6b7280", []),
    (
        "Fixed expenses", "expense", "Home", "#ef4444",
        ["Social insurance", "Rent", "Utilities", "Internet & mobile"],
    ),
    ("Subscriptions", "expense", "CreditCard", "#f97316", []),
    ("Courses & lessons", "expense", "GraduationCap", "#eab308", ["Tutoring", "Online courses"]),
    ("Car", "expense", "Car", "#84cc16", ["Fuel", "Fines", "Repairs", "Taxes"]),
    ("Food", "expense", "UtensilsCrossed", "#22c55e", []),
    ("Groceries", "expense", "ShoppingCart", "#14b8a6", []),
    ("Transport", "expense", "Bus", "#06b6d4", []),
]


# ---- Reads ----

@read_or_default([])
def list_categories(db: Session, kind: str | None = None) -> list[Category]:
    query = db.query(Category)
    if kind:
        query = query.filter(Category.kind == kind)
    return query.order_by(Category.kind, Category.parent_id.is_not(None), Category.id).all()


def get_category(db: Session, category_id: int) -> Category | None:
    return db.query(Category).filter(Category.id == category_id).first()


def require_category(db: Session, category_id: int) -> Category:
    category = get_category(db, category_id)
    if category is None:
        raise ValidationError(f"Category {category_id} does not exist")
    return category


# ---- Nesting rules ----

def _check_parent(db: Session, parent_id: int, kind: str, child_id: int | None = None) -> Category:
    if child_id is not None and parent_id == child_id:
        raise ValidationError("A category cannot be its own parent")

    parent = get_category(db, parent_id)
    if parent is None:
        raise ValidationError(f"Parent category {parent_id} does not exist")
    if parent.parent_id is not None:
        raise ValidationError("Subcategories cannot have subcategories of their own")
    if parent.kind != kind:
        raise ValidationError(f"A {kind} category cannot sit under the {parent.kind} category {parent.name!r}")
    return parent


def _has_children(db: Session, category_id: int) -> bool:
    return (
        db.query(Category.id).filter(Category.parent_id == category_id).first()
        is not None
    )


# ---- Mutations ----

@write_guard("create_category")
def create_category(db: Session, payload: CategoryCreate) -> int:
    if payload.parent_id is not None:
        _check_parent(db, payload.parent_id, payload.kind)

    category = Category(
        name=payload.name,
        kind=payload.kind,
        parent_id=payload.parent_id,
        icon=payload.icon,
        color=payload.color,
    )
    db.add(category)
    db.commit()
    db.refresh(category)

    logger.info("category_created", category_id=category.id, kind=category.kind)
    return category.id


@write_guard("update_category")
def update_category(db: Session, category_id: int, patch: CategoryPatch) -> int:
    """
    Partial update. Subcategories always share their parent's kind:
    re-kinding a root carries its subcategories along.
    """
    current = get_category(db, category_id)
    if current is None:
        return 0

    fields = patch.present_fields()
    values = {}

    kind = patch.kind if "kind" in fields else current.kind
    parent_id = patch.parent_id if "parent_id" in fields else current.parent_id
    has_children = _has_children(db, category_id)

    if parent_id is not None and ("parent_id" in fields or kind != current.kind):
        _check_parent(db, parent_id, kind, child_id=category_id)
        if has_children:
            raise ValidationError("A category with subcategories cannot become a subcategory")

    if "name" in fields:
        values[Category.name] = patch.name
    if "kind" in fields:
        values[Category.kind] = kind
    if "parent_id" in fields:
        values[Category.parent_id] = parent_id
    if "icon" in fields:
        values[Category.icon] = patch.icon
    if "color" in fields:
        values[Category.color] = patch.color

    if not values:
        return 1

    affected = (
        db.query(Category)
        .filter(Category.id == category_id)
        .update(values, synchronize_session=False)
    )
    if kind != current.kind and has_children:
        moved = (
            db.query(Category)
            .filter(Category.parent_id == category_id)
            .update({Category.kind: kind}, synchronize_session=False)
        )
        logger.info("subcategories_rekinded", category_id=category_id, kind=kind, affected=moved)
    db.commit()

    logger.info("category_updated", category_id=category_id, fields=sorted(fields), affected=affected)
    return affected


@write_guard("delete_category")
def delete_category(db: Session, category_id: int) -> int:
    """
    Delete a category unless a transaction still points at it.

    Raises ReferentialConflictError when referenced.
    """
    in_use = (
        db.query(Transaction.id)
        .filter(Transaction.category_id == category_id)
        .first()
        is not None
    )
    if in_use:
        raise ReferentialConflictError("Cannot delete category that is used in transactions")

    affected = (
        db.query(Category)
        .filter(Category.id == category_id)
        .delete(synchronize_session=False)
    )
    db.commit()

    logger.info("category_deleted", category_id=category_id, affected=affected)
    return affected


@write_guard("seed_categories")
def seed_default_categories(db: Session) -> int:
    """
    Insert DEFAULT_CATEGORIES when the table is empty.
    Returns the number of rows inserted (0 if categories already exist).
    """
    if db.query(Category.id).first() is not None:
        return 0

    inserted = 0
    for name, kind, icon, color, children in DEFAULT_CATEGORIES:
        parent = Category(name=name, kind=kind, icon=icon, color=color)
        db.add(parent)
        db.flush()  # need parent.id for the children
        inserted += 1

        for child_name in children:
            db.add(
                Category(
                    name=child_name,
                    kind=kind,
                    parent_id=parent.id,
                    icon=icon,
                    color=color,
                )
            )
            inserted += 1

    db.commit()
    logger.info("categories_seeded", inserted=inserted)
    return inserted
