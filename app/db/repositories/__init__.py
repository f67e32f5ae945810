"""
Repository layer for database operations.

Implements the storage side of event and booking writes: existence checks,
insert-or-update with unique-index translation, and the lookups used by
the services. Read paths for events are cached in Redis.
"""
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.models.event import Event
from app.db.models.booking import Booking
from app.schemas import PreparedEvent, PreparedBooking, EventCard, EventOut
from app.core.errors import DependencyUnavailableError, UniquenessError
from app.cache.cache_decorators import cached
from app.core.logging import logger
from typing import Optional, List, TypeVar
import uuid

Record = TypeVar("Record", Event, Booking)


async def _execute(db: AsyncSession, q, operation: str):
    """
    Run a read query, reporting an unreachable database as
    DependencyUnavailableError.
    """
    try:
        return await db.execute(q)
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Storage {operation} failed: {e}")
        raise DependencyUnavailableError(operation) from e


async def exists(db: AsyncSession, model, **filters) -> bool:
    """
    Check whether any row of ``model`` matches all ``filters``.

    Raises:
        DependencyUnavailableError: If the database cannot be queried
    """
    q = select(model.id).filter_by(**filters).limit(1)
    res = await _execute(db, q, f"{model.__tablename__} lookup")
    return res.first() is not None


async def event_exists(db: AsyncSession, event_id: uuid.UUID) -> bool:
    return await exists(db, Event, id=event_id)


async def save(db: AsyncSession, record: Record) -> Record:
    """
    Insert or update a record and commit.
    
    Args:
        db: Database session
        record: New or already-persistent ORM object
        
    Returns:
        The refreshed record, with database-managed timestamps loaded
        
    Raises:
        UniquenessError: If the write violates the unique slug index
        DependencyUnavailableError: If the database cannot be written to
    """
    # Rollback expires the record, so read what the error paths need first
    table = record.__tablename__
    slug = record.slug if isinstance(record, Event) else None
    db.add(record)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        message = str(e.orig).lower()
        if slug is not None and ("slug" in message or "unique" in message or "duplicate" in message):
            logger.warning(f"Slug collision on write: {slug}")
            raise UniquenessError("slug", slug) from e
        raise DependencyUnavailableError(f"{table} write") from e
    except (SQLAlchemyError, OSError) as e:
        await db.rollback()
        logger.error(f"Write to {table} failed: {e}")
        raise DependencyUnavailableError(f"{table} write") from e
    await db.refresh(record)
    return record


async def create_event(db: AsyncSession, prepared: PreparedEvent) -> Event:
    return await save(db, Event(**prepared.model_dump()))


async def update_event(db: AsyncSession, event: Event, prepared: PreparedEvent) -> Event:
    for field, value in prepared.model_dump().items():
        if getattr(event, field) != value:
            setattr(event, field, value)
    return await save(db, event)


async def get_event(db: AsyncSession, event_id: uuid.UUID) -> Optional[Event]:
    q = select(Event).where(Event.id == event_id)
    res = await _execute(db, q, "events lookup")
    return res.scalars().first()


async def get_event_by_slug(db: AsyncSession, slug: str) -> Optional[Event]:
    q = select(Event).where(Event.slug == slug)
    res = await _execute(db, q, "events lookup")
    return res.scalars().first()


@cached('events:list')
async def list_event_cards(db: AsyncSession) -> List[dict]:
    """
    List every event as a card (title, image, slug, location, date, time),
    soonest first. Returned as dicts for caching compatibility.
    """
    q = select(Event).order_by(Event.date, Event.time, Event.created_at.desc())
    res = await _execute(db, q, "events listing")
    return [EventCard.model_validate(ev).model_dump() for ev in res.scalars().all()]


@cached('events:detail')
async def get_event_detail(db: AsyncSession, slug: str) -> Optional[dict]:
    """Return an event with its booking count, or None if the slug is unknown."""
    ev = await get_event_by_slug(db, slug)
    if ev is None:
        return None
    detail = EventOut.model_validate(ev)
    detail.bookings_count = await count_bookings_for_event(db, ev.id)
    return detail.model_dump(mode="json")


async def count_bookings_for_event(db: AsyncSession, event_id: uuid.UUID) -> int:
    q = select(func.count(Booking.id)).where(Booking.event_id == event_id)
    res = await _execute(db, q, "bookings count")
    return res.scalar() or 0


async def create_booking(db: AsyncSession, prepared: PreparedBooking) -> Booking:
    return await save(db, Booking(**prepared.model_dump()))


async def update_booking(db: AsyncSession, booking: Booking, prepared: PreparedBooking) -> Booking:
    for field, value in prepared.model_dump().items():
        if getattr(booking, field) != value:
            setattr(booking, field, value)
    return await save(db, booking)


async def get_booking(db: AsyncSession, booking_id: uuid.UUID) -> Optional[Booking]:
    q = select(Booking).where(Booking.id == booking_id)
    res = await _execute(db, q, "bookings lookup")
    return res.scalars().first()


async def list_bookings_for_event(db: AsyncSession, event_id: uuid.UUID) -> List[Booking]:
    q = select(Booking).where(Booking.event_id == event_id).order_by(Booking.created_at)
    res = await _execute(db, q, "bookings listing")
    return list(res.scalars().all())
