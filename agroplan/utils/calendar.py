"""
Whole-day calendar arithmetic.

All values are timezone-naive calendar days. ISO day strings (``YYYY-MM-DD``)
sort lexicographically in date order, which the window comparisons rely on.
"""
import re
from datetime import date, timedelta
from typing import Union

_ISO_DAY = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_DAY_MONTH_YEAR = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")


class DateParseError(ValueError):
    """Raised when a date string is not a valid calendar day."""


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def to_iso_day(day: date) -> str:
    return day.isoformat()


def today() -> date:
    return date.today()


def _build_day(year: int, month: int, day: int, raw: str) -> date:
    # date() refuses components that do not round-trip (31/02, month 13)
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise DateParseError(f"Invalid calendar day: {raw!r}") from exc


def parse_loose_date(value: Union[str, date, None]) -> date:
    """
    Parse ``YYYY-MM-DD`` or ``DD/MM/YYYY``.

    The day-first form tolerates ``.``, ``\\`` and ``-`` as separators and
    stray whitespace. Raises DateParseError for anything else, including
    dates whose components do not exist (31/02/2024).
    """
    if isinstance(value, date):
        return value
    raw = (value or "").strip()
    if not raw:
        raise DateParseError("Empty date")

    iso = _ISO_DAY.match(raw)
    if iso:
        return _build_day(int(iso.group(1)), int(iso.group(2)), int(iso.group(3)), raw)

    normalized = re.sub(r"\s+", "", raw)
    normalized = normalized.replace(".", "/").replace("\\", "/").replace("-", "/")
    dmy = _DAY_MONTH_YEAR.match(normalized)
    if dmy:
        return _build_day(int(dmy.group(3)), int(dmy.group(2)), int(dmy.group(1)), raw)

    raise DateParseError(f"Unrecognized date format: {raw!r}")



def clamp_iso_day(iso: str, min_iso: str, max_iso: str) -> str:
    """Clamp an ISO day string into [min_iso, max_iso]."""
    if iso < min_iso:
        return min_iso
    if iso > max_iso:
        return max_iso
    return iso
