# main.py
# Role: Application entry point for the household ledger.
#       Initializes logging and the FastAPI app, creates database tables,
#       seeds default categories, maps domain errors to HTTP, and
#       registers all route modules.

"""
Main FastAPI app for the household ledger.

Here we only:
- create the FastAPI app
- create DB tables (and seed categories on an empty database)
- translate domain exceptions into HTTP responses
- include route modules
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

import config
from db import Base, SessionLocal, engine
from app.errors import LedgerError
from app.log import configure_logging, get_logger
from app.services.categories import seed_default_categories
from app.services.store_guard import STORE_ERRORS
from app.routes_root import router as root_router
from app.routes_auth import router as auth_router
from app.routes_categories import router as categories_router
from app.routes_transactions import router as transactions_router
from app.routes_stats import router as stats_router
from app.routes_budgets import router as budgets_router
from app.routes_savings import router as savings_router
from app.routes_export import router as export_router

configure_logging()
logger = get_logger(__name__)


# -------------------------------------------------------------------
# DB setup
# -------------------------------------------------------------------

def init_db(bind=engine, seed: bool = config.SEED_CATEGORIES) -> bool:
    """
    Create tables (only if they don't exist yet) and seed categories.

    A store that can't be reached is logged, not fatal: reads will
    degrade to empty results and writes will fail with 503.
    """
    try:
        Base.metadata.create_all(bind=bind)
        if seed:
            db = SessionLocal(bind=bind)
            try:
                seed_default_categories(db)
            finally:
                db.close()
    except (LedgerError, *STORE_ERRORS) as e:
        logger.warning("db_init_failed", error=str(e))
        return False
    return True


init_db()

# FastAPI application instance
app = FastAPI(title="Household Ledger")


# -------------------------------------------------------------------
# Error mapping
# -------------------------------------------------------------------

@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


async def store_error_handler(request: Request, exc: Exception):
    logger.error("store_unavailable", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=503, content={"detail": "Database not available"})


for _store_error in STORE_ERRORS:
    app.add_exception_handler(_store_error, store_error_handler)


# -------------------------------------------------------------------
# Include routers
# -------------------------------------------------------------------

# Root / health
app.include_router(root_router)

# Passphrase sign-in
app.include_router(auth_router)

# Shared categories
app.include_router(categories_router)

# Transactions list + mutations
app.include_router(transactions_router)

# Balance, category breakdown, monthly reports
app.include_router(stats_router)

# Budgets and budget status
app.include_router(budgets_router)

# Savings / withdrawals
app.include_router(savings_router)

# CSV / JSON export
app.include_router(export_router)
