"""
Canonicalisation helpers for Event and Booking fields.

Each helper takes a loosely-typed input value and either returns its
canonical form or raises the matching error from ``app.core.errors``.
"""
import re
from datetime import date, datetime, timezone
from typing import Any, List, Optional

from dateutil import parser as date_parser

from app.core.errors import (
    InvalidDateError,
    InvalidEmailError,
    InvalidTimeError,
    RequiredFieldError,
)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_TIME_PATTERN = re.compile(r"^([0-9]{1,2}):([0-5][0-9])(?:\s*([ap]m))?$", re.IGNORECASE | re.ASCII)
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def slugify(value: str) -> str:
    """
    Build a URL-safe slug from a title.

    Lower-cases and trims the input, collapses every run of characters
    outside ``[a-z0-9]`` into a single dash and strips dashes at both ends.

    Example:
        >>> slugify("React Summit 2026!")
        'react-summit-2026'
    """
    return _NON_ALNUM.sub("-", value.lower().strip()).strip("-")


def normalize_date(value: Any) -> str:
    """
    Normalize a calendar date to ``YYYY-MM-DD`` (UTC).

    Accepts ``date``/``datetime`` objects and any date string python-dateutil
    can parse ("2026-03-18", "March 18, 2026", "18 Mar 2026 10:00 +0200").
    Timezone-aware values are converted to UTC first; naive values are
    taken as UTC.

    Raises:
        InvalidDateError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, str) and value.strip():
        try:
            parsed = date_parser.parse(value.strip())
        except (ValueError, OverflowError) as e:
            raise InvalidDateError(value) from e
    else:
        raise InvalidDateError(value)

    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc)
        except OverflowError as e:
            # UTC shift pushed the value outside datetime's range
            raise InvalidDateError(value) from e
    return parsed.date().isoformat()


def normalize_time(value: Any) -> str:
    """
    Normalize a time of day to zero-padded 24-hour ``HH:MM``.

    Accepts ``H:MM`` / ``HH:MM`` with an optional ``AM``/``PM`` marker
    (any case, optional whitespace before it). Hours run 0-23 without a
    marker and 1-12 with one.

    Raises:
        InvalidTimeError: If the value does not match that grammar
    """
    if not isinstance(value, str):
        raise InvalidTimeError(value)

    match = _TIME_PATTERN.match(value.strip())
    if not match:
        raise InvalidTimeError(value)

    hours = int(match.group(1))
    minutes = match.group(2)
    meridiem = match.group(3).lower() if match.group(3) else None

    if meridiem:
        if not 1 <= hours <= 12:
            raise InvalidTimeError(value)
        if hours == 12:
            hours = 0 if meridiem == "am" else 12
        elif meridiem == "pm":
            hours += 12
    elif hours > 23:
        raise InvalidTimeError(value)

    return f"{hours:02d}:{minutes}"


def normalize_email(value: Any) -> str:
    """Trim and lower-case an email address, then check its shape."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise RequiredFieldError("email", "Email is required")
    if not isinstance(value, str):
        raise InvalidEmailError(value)

    email = value.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise InvalidEmailError(value)
    return email


def require_text(field: str, value: Any) -> str:
    """Return ``value`` trimmed, rejecting missing or blank strings."""
    if not isinstance(value, str) or not value.strip():
        raise RequiredFieldError(field, f"{field} is required and cannot be empty")
    return value.strip()


def require_text_list(field: str, value: Optional[Any]) -> List[str]:
    """Return a list of trimmed items; needs at least one item and no blank ones."""
    if not isinstance(value, (list, tuple)) or not value:
        raise RequiredFieldError(field, f"{field} must contain at least one non-empty item")
    items = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise RequiredFieldError(field, f"{field} must contain at least one non-empty item")
        items.append(item.strip())
    return items
