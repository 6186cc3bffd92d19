"""
Helpers untuk normalisasi input dari form dan query string
"""
import re
from datetime import date, datetime
from typing import Any, Optional

ISO_WITH_TIME = re.compile(r"^\d{4}-\d{2}-\d{2}T")
ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
DAY_FIRST_DATE = re.compile(r"^(\d{2})-(\d{2})-(\d{4})$")


def normalize_date_string(value: Any) -> Optional[str]:
    """
    Normalize a date to canonical ``YYYY-MM-DD``.

    Accepts ``DD-MM-YYYY``, ``YYYY-MM-DD``, ISO strings with a time part
    and ``date``/``datetime`` objects. Empty input returns None. Anything
    else, including impossible calendar dates, raises ValueError.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    s = str(value).strip()
    if not s:
        return None

    if ISO_WITH_TIME.match(s):
        s = s[:10]

    match = ISO_DATE.match(s)
    if match:
        year, month, day = match.groups()
    else:
        match = DAY_FIRST_DATE.match(s)
        if not match:
            raise ValueError(f"Invalid date format: {value}")
        day, month, year = match.groups()

    try:
        return date(int(year), int(month), int(day)).isoformat()
    except ValueError:
        raise ValueError(f"Invalid calendar date: {value}")


def parse_date(value: Any) -> Optional[date]:
    """Like normalize_date_string but returns a ``date`` object"""
    normalized = normalize_date_string(value)
    if normalized is None:
        return None
    return date.fromisoformat(normalized)


def parse_optional_int(value: Any) -> Optional[int]:
    """Parse an id coming from a form or JSON body; empty values mean None"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    s = str(value).strip()
    if s == "" or s.lower() in ("null", "undefined"):
        return None
    return int(s)


def is_truthy(value: Any) -> bool:
    """Form flags arrive as strings ('true', '1', 'on')"""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("true", "1", "yes", "on")
