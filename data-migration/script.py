"""
This script seeds the default category tree and (optionally) loads
transactions from CSV files in the same layout the export endpoint writes
(date, kind, category, amount, person, description) into the database.

Purpose:
- Bootstrap a fresh database with the household categories
- Re-import a previous CSV export for a given owner
- Serve as a repeatable setup step during development

Usage (from the project root):
    python data-migration/script.py                       # seed categories only
    python data-migration/script.py --open-id household   # seed + import CSVs
"""


from __future__ import annotations

import argparse
from pathlib import Path

import pandas as pd

from db import SessionLocal, engine, Base
from models import Category, Transaction
from app.log import get_logger
from app.services.amounts import parse_instant, to_minor_units
from app.services.categories import seed_default_categories
from app.services.users import upsert_user

logger = get_logger("data-migration")

IMPORT_DIR = Path("data-migration/normalized")
REQUIRED_COLUMNS = {"date", "kind", "category", "amount"}


def _none_if_nan(x):
    if pd.isna(x):
        return None
    s = str(x).strip()
    return None if s == "" or s.lower() == "nan" else s


def load_csv_rows(path: Path, category_ids: dict[tuple[str, str], int]) -> list[dict]:
    """
    Read one export-format CSV into plain transaction dicts.

    Rows whose category name/kind pair is unknown are skipped and logged.
    """
    df = pd.read_csv(path, dtype=str)

    # normalize headers
    df.columns = df.columns.str.strip().str.lower()

    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"{path.name}: missing required columns: {sorted(missing)}")

    for optional in ("person", "description"):
        if optional not in df.columns:
            df[optional] = None

    # drop fully empty rows
    df = df.dropna(how="all").copy()

    rows = []
    for row in df.itertuples(index=False):
        kind = (_none_if_nan(row.kind) or "").lower()
        category_name = _none_if_nan(row.category) or ""
        category_id = category_ids.get((category_name.lower(), kind))
        if category_id is None:
            logger.warning("import_row_skipped", file=path.name, category=category_name, kind=kind)
            continue

        rows.append(
            {
                "category_id": category_id,
                "kind": kind,
                "amount": to_minor_units(str(row.amount).replace(",", ".").strip()),
                "transaction_date": parse_instant(row.date),
                "person": _none_if_nan(row.person),
                "description": _none_if_nan(row.description),
            }
        )
    return rows


def import_csvs_to_db(
    open_id: str | None,
    folder: Path = IMPORT_DIR,
    batch_size: int = 1000,
) -> int:
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    total_inserted = 0

    try:
        seeded = seed_default_categories(session)
        logger.info("seed_done", inserted=seeded)

        if not open_id:
            return 0

        folder = Path(folder)
        csv_files = sorted(folder.glob("*.csv"))
        if not csv_files:
            raise FileNotFoundError(f"No CSV files found in: {folder.resolve()}")

        owner = upsert_user(session, open_id=open_id, login_method="import")
        category_ids = {
            (c.name.lower(), c.kind): c.id for c in session.query(Category).all()
        }

        for f in csv_files:
            objs = [
                Transaction(user_id=owner.id, **row)
                for row in load_csv_rows(f, category_ids)
            ]

            # insert in batches
            for i in range(0, len(objs), batch_size):
                session.add_all(objs[i : i + batch_size])
                session.commit()

            total_inserted += len(objs)
            logger.info("file_imported", file=f.name, rows=len(objs))

        logger.info("import_done", total_inserted=total_inserted, user_id=owner.id)

    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

    return total_inserted


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed categories and import exported CSVs.")
    parser.add_argument("--open-id", default=None, help="owner to import transactions for")
    parser.add_argument("--folder", default=str(IMPORT_DIR), help="folder with *.csv files")
    args = parser.parse_args()

    import_csvs_to_db(args.open_id, Path(args.folder))
