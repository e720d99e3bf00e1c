"""
Domain exceptions for the household ledger.

Services raise these; main.py maps them to HTTP responses.
"""


class LedgerError(Exception):
    """Base exception for ledger operations."""

    status_code = 400


class ValidationError(LedgerError):
    """Missing or invalid input, rejected before touching the store."""

    status_code = 422


class ReferentialConflictError(LedgerError):
    """A row is still referenced and cannot be removed."""

    status_code = 409


class StoreUnavailableError(LedgerError):
    """The database could not be reached for a write."""

    status_code = 503
