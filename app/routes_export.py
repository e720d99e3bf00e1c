"""
Download endpoints for the export page (CSV of transactions, JSON snapshot).
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from app.deps import DateRange, get_db, get_owner_id
from app.services.export import export_filename, export_snapshot, export_transactions_csv

router = APIRouter(prefix="/export", tags=["export"])


@router.get("/transactions.csv")
def transactions_csv(
    date_range: DateRange = Depends(),
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    content = export_transactions_csv(db, owner_id, date_range.start, date_range.end)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename("csv")}"'},
    )


@router.get("/snapshot")
def snapshot(
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return JSONResponse(
        content=export_snapshot(db, owner_id),
        headers={"Content-Disposition": f'attachment; filename="{export_filename("json")}"'},
    )
