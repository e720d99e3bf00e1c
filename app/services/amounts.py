# app/services/amounts.py
#
# Amount & Date Helpers
# Converts user-entered decimal amounts into integer minor units and
# normalizes economic dates / month keys used by the report queries.

import calendar
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from app.errors import ValidationError

MONTH_KEY_RE = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{2})$")

_CENT = Decimal("1")

# Largest storable amount: a signed 32-bit INT column, i.e. 21474836.47
MAX_MINOR_UNITS = 2**31 - 1


# ---- Money ----

def to_minor_units(amount) -> int:
    """
    Convert a positive decimal amount (e.g. 12.50) to cents (1250).

    Rounds half-up, so 0.125 -> 13. Floats go through str() first so
    12.5 is treated as the literal the user typed.
    """
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Invalid amount: {amount!r}")

    if not value.is_finite() or value <= 0:
        raise ValidationError("Amount must be greater than zero")

    if value > MAX_MINOR_UNITS:
        raise ValidationError(f"Amount must not exceed {from_minor_units(MAX_MINOR_UNITS)}")

    cents = int((value * 100).quantize(_CENT, rounding=ROUND_HALF_UP))
    if cents <= 0:
        raise ValidationError("Amount must be at least 0.01")
    if cents > MAX_MINOR_UNITS:
        raise ValidationError(f"Amount must not exceed {from_minor_units(MAX_MINOR_UNITS)}")
    return cents


def from_minor_units(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(Decimal("0.01"))


# ---- Dates ----

def parse_instant(value) -> datetime:
    """
    Parse an ISO-8601 instant or date-only string into a naive local datetime.

    - '2024-03-05'                -> 2024-03-05 00:00:00
    - '2024-03-05T10:30:00'       -> kept as local civil time
    - '2024-03-05T10:30:00Z'      -> converted to local time, tzinfo dropped
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        s = str(value or "").strip()
        if not s:
            raise ValidationError("Date is required")
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(s)
        except ValueError:
            raise ValidationError(f"Invalid date: {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)

    # millisecond precision, so month_bounds' 23:59:59.999 end covers the whole day
    return parsed.replace(microsecond=parsed.microsecond // 1000 * 1000)


def parse_month_key(month_key: str) -> tuple[int, int]:
    """'YYYY-MM' -> (year, month)."""
    match = MONTH_KEY_RE.match(str(month_key or "").strip())
    if not match:
        raise ValidationError(f"Invalid month key: {month_key!r} (expected YYYY-MM)")

    year = int(match.group("year"))
    month = int(match.group("month"))
    if not (1 <= month <= 12) or year < 1:
        raise ValidationError(f"Invalid month key: {month_key!r} (expected YYYY-MM)")
    return year, month


def month_bounds(month_key: str) -> tuple[datetime, datetime]:
    """
    Closed range covering the whole calendar month:
    day 1 00:00:00 through the last day 23:59:59.999.
    """
    year, month = parse_month_key(month_key)

    start = datetime(year, month, 1)
    last_day = calendar.monthrange(year, month)[1]
    end = datetime(year, month, last_day, 23, 59, 59, 999000)
    return start, end


def month_key_for(moment: datetime) -> str:
    return f"{moment.year:04d}-{moment.month:02d}"


def normalize_month_key(month_key: str) -> str:
    year, month = parse_month_key(month_key)
    return f"{year:04d}-{month:02d}"
