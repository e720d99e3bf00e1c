# app/services/export.py
#
# Export Helpers
# Builds the downloadable CSV / JSON snapshots of an owner's data.
# Exports are a convenience copy only; the database stays authoritative.

from datetime import datetime

import pandas as pd
from sqlalchemy.orm import Session

from app.schemas import BudgetOut, TransactionOut
from app.services.amounts import from_minor_units
from app.services.budgets import list_all_budgets
from app.services.categories import list_categories
from app.services.transactions import list_transactions

CSV_COLUMNS = ["date", "kind", "category", "amount", "person", "description"]


def transactions_frame(transactions, category_names: dict[int, str]) -> pd.DataFrame:
    """
    One row per transaction: full economic instant (re-importable without
    loss), amounts in major units with two decimals.
    Unknown categories fall back to their id.
    """
    rows = [
        {
            "date": t.transaction_date.isoformat(timespec="milliseconds"),
            "kind": t.kind,
            "category": category_names.get(t.category_id, str(t.category_id)),
            "amount": f"{from_minor_units(t.amount):.2f}",
            "person": t.person or "",
            "description": t.description or "",
        }
        for t in transactions
    ]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def export_transactions_csv(
    db: Session,
    owner_id: int,
    start: datetime | None = None,
    end: datetime | None = None,
) -> str:
    transactions = list_transactions(db, owner_id, start, end)
    category_names = {c.id: c.name for c in list_categories(db)}

    df = transactions_frame(transactions, category_names)
    return df.to_csv(index=False)


def export_snapshot(db: Session, owner_id: int) -> dict:
    transactions = list_transactions(db, owner_id)
    budgets = list_all_budgets(db, owner_id)

    return {
        "export_date": datetime.now().isoformat(),
        "transactions": [TransactionOut.model_validate(t).model_dump(mode="json") for t in transactions],
        "budgets": [BudgetOut.model_validate(b).model_dump(mode="json") for b in budgets],
    }


def export_filename(extension: str) -> str:
    return f"expense-tracker-{datetime.now().strftime('%Y-%m-%d')}.{extension}"
