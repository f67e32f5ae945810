"""
Validation and normalization of Event and Booking records before they are
written.

Both entry points are explicit: the write path passes the candidate record
and, on update, the previously persisted record. Normalization is applied
only to fields that differ between the two (on create every field counts
as changed). Inputs are never mutated; a new prepared model is returned or
a typed error from ``app.core.errors`` is raised and nothing is persisted.
"""
import asyncio
from typing import Any, Awaitable, Callable, Mapping, Optional, Set
from uuid import UUID

from app.core.errors import (
    DanglingReferenceError,
    DependencyUnavailableError,
    RequiredFieldError,
)
from app.domain.normalizers import (
    normalize_date,
    normalize_email,
    normalize_time,
    require_text,
    require_text_list,
    slugify,
)
from app.schemas import EVENT_LIST_FIELDS, EVENT_TEXT_FIELDS, PreparedBooking, PreparedEvent

EventExists = Callable[[UUID], Awaitable[bool]]


def changed_fields(candidate: Mapping[str, Any], previous: Optional[Mapping[str, Any]]) -> Set[str]:
    """
    Return the names of fields whose candidate value differs from the
    previous record. With no previous record every candidate field is
    considered changed.
    """
    if previous is None:
        return set(candidate)
    return {name for name, value in candidate.items() if previous.get(name) != value}


def prepare_event(
    candidate: Mapping[str, Any],
    previous: Optional[Mapping[str, Any]] = None,
) -> PreparedEvent:
    """
    Validate and canonicalise an event record.

    Args:
        candidate: Full record to be written (on update, the previous record
            merged with the submitted fields)
        previous: The currently persisted record, or None on create

    Returns:
        PreparedEvent with slug, date and time in canonical form

    Raises:
        RequiredFieldError: A required string or list is missing or blank,
            or the title has no characters a slug can be built from
        InvalidDateError: The date cannot be parsed
        InvalidTimeError: The time does not match ``H:MM``/``HH:MM`` [AM|PM]
    """
    changed = changed_fields(candidate, previous)
    record = {field: require_text(field, candidate.get(field)) for field in EVENT_TEXT_FIELDS}
    for field in EVENT_LIST_FIELDS:
        record[field] = require_text_list(field, candidate.get(field))

    if "title" in changed or not previous or not previous.get("slug"):
        record["slug"] = slugify(record["title"])
        if not record["slug"]:
            raise RequiredFieldError("title", "title must contain at least one letter or digit")
    else:
        record["slug"] = previous["slug"]

    for field, normalize in (("date", normalize_date), ("time", normalize_time)):
        value = candidate.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise RequiredFieldError(field)
        record[field] = normalize(value) if field in changed else value

    return PreparedEvent(**record)


def _coerce_event_id(value: Any) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except ValueError as e:
        # A malformed id cannot point at any stored event
        raise DanglingReferenceError(value) from e


async def prepare_booking(
    candidate: Mapping[str, Any],
    event_exists: EventExists,
    previous: Optional[Mapping[str, Any]] = None,
) -> PreparedBooking:
    """
    Validate a booking and confirm that the event it references exists.

    The email is re-checked on every call. The event lookup only runs when
    ``event_id`` is new or differs from ``previous``; an unchanged reference
    is trusted. Email errors win over reference errors.

    Raises:
        RequiredFieldError: email or event_id missing
        InvalidEmailError: email is not ``local@domain.tld``
        DanglingReferenceError: the referenced event does not exist
        DependencyUnavailableError: the existence check could not be performed
    """
    email = normalize_email(candidate.get("email"))

    raw_event_id = candidate.get("event_id")
    if raw_event_id is None or not str(raw_event_id).strip():
        raise RequiredFieldError("event_id", "Event reference (event_id) is required")
    event_id = _coerce_event_id(raw_event_id)

    previous_event_id = None
    if previous is not None and previous.get("event_id") is not None:
        previous_event_id = _coerce_event_id(previous["event_id"])

    if event_id != previous_event_id:
        try:
            found = await event_exists(event_id)
        except DependencyUnavailableError:
            raise
        except (OSError, asyncio.TimeoutError) as e:
            raise DependencyUnavailableError("event existence check") from e
        if not found:
            raise DanglingReferenceError(event_id)

    return PreparedBooking(event_id=event_id, email=email)
