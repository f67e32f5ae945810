from functools import partial
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from app.schemas import BookingCreate, BookingUpdate, BookingOut
from app.domain.validators import prepare_booking
from app.db.models.booking import Booking
from app.db.repositories import (
    event_exists as db_event_exists,
    create_booking as db_create_booking,
    update_booking as db_update_booking,
    get_booking as db_get_booking,
    get_event_by_slug as db_get_event_by_slug,
    list_bookings_for_event as db_list_bookings_for_event,
)
from app.cache.redis_client import cache
from app.core.errors import BookingNotFoundError, EventNotFoundError
from app.core.logging import logger
from typing import List


class BookingService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_booking(self, payload: BookingCreate) -> Booking:
        prepared = await prepare_booking(
            payload.model_dump(),
            partial(db_event_exists, self.session),
        )
        booking = await db_create_booking(self.session, prepared)
        # detail views carry a booking count
        await cache.invalidate_events()
        logger.info(f"Booking created: {booking.id} for event {booking.event_id}")
        return booking

    async def update_booking(self, booking_id: UUID, payload: BookingUpdate) -> Booking:
        """
        Re-submit booking fields. The email is always re-validated; the
        event reference is only looked up again when it changes.
        
        Raises:
            BookingNotFoundError: If the booking does not exist
        """
        booking = await db_get_booking(self.session, booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        previous = BookingOut.model_validate(booking).model_dump(include={"event_id", "email"})
        candidate = {**previous, **payload.model_dump(exclude_unset=True)}
        prepared = await prepare_booking(
            candidate,
            partial(db_event_exists, self.session),
            previous,
        )
        booking = await db_update_booking(self.session, booking, prepared)
        await cache.invalidate_events()
        logger.info(f"Booking updated: {booking.id}")
        return booking

    async def list_bookings_for_event(self, slug: str) -> List[Booking]:
        event = await db_get_event_by_slug(self.session, slug)
        if event is None:
            raise EventNotFoundError(slug)
        return await db_list_bookings_for_event(self.session, event.id)
