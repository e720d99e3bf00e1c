"""
Root / basic endpoints (health, landing).
"""

from fastapi import APIRouter
from fastapi.responses import RedirectResponse

router = APIRouter()


@router.get("/")
def read_root():
    """
    Landing endpoint: the API has no HTML pages, send people to the docs.
    """
    return RedirectResponse(url="/docs", status_code=302)


@router.get("/health")
def health():
    """Simple liveness check (does not touch the database)."""
    return {"status": "ok"}
