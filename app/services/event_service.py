from sqlalchemy.ext.asyncio import AsyncSession
from app.schemas import EventCreate, EventUpdate, EventOut
from app.domain.validators import prepare_event
from app.db.models.event import Event
from app.db.repositories import (
    exists as db_exists,
    create_event as db_create_event,
    update_event as db_update_event,
    get_event_by_slug as db_get_event_by_slug,
    get_event_detail as db_get_event_detail,
    list_event_cards as db_list_event_cards,
)
from app.cache.redis_client import cache
from app.core.errors import EventNotFoundError, UniquenessError
from app.core.logging import logger
from app.data.featured import FEATURED_EVENTS
from typing import List


class EventService:
    """
    Validate-then-persist operations for events.
    
    Every write runs prepare_event first; nothing reaches the database
    unless the whole record is valid. The slug pre-check is best effort,
    the unique index on events.slug is the final authority.
    """
    
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _ensure_slug_free(self, slug: str) -> None:
        if await db_exists(self.session, Event, slug=slug):
            logger.warning(f"Slug already taken: {slug}")
            raise UniquenessError("slug", slug)

    async def create_event(self, payload: EventCreate) -> Event:
        prepared = prepare_event(payload.model_dump())
        await self._ensure_slug_free(prepared.slug)
        event = await db_create_event(self.session, prepared)
        await cache.invalidate_events()
        logger.info(f"Event created: {event.slug}")
        return event

    async def update_event(self, slug: str, payload: EventUpdate) -> Event:
        """
        Apply a partial update. Only fields that differ from the stored
        event are normalized again; a title change re-derives the slug.
        
        Raises:
            EventNotFoundError: If no event has this slug
        """
        event = await self._get_or_404(slug)
        previous = EventOut.model_validate(event).model_dump(exclude={"id", "created_at", "updated_at", "bookings_count"})
        candidate = {**previous, **payload.model_dump(exclude_unset=True)}
        prepared = prepare_event(candidate, previous)
        if prepared.slug != event.slug:
            await self._ensure_slug_free(prepared.slug)
        event = await db_update_event(self.session, event, prepared)
        await cache.invalidate_events()
        logger.info(f"Event updated: {slug} -> {event.slug}")
        return event

    async def get_event(self, slug: str) -> dict:
        detail = await db_get_event_detail(self.session, slug)
        if detail is None:
            raise EventNotFoundError(slug)
        return detail

    async def list_events(self) -> List[dict]:
        return await db_list_event_cards(self.session)

    def featured_events(self) -> List[dict]:
        return [dict(item) for item in FEATURED_EVENTS]

    async def _get_or_404(self, slug: str) -> Event:
        event = await db_get_event_by_slug(self.session, slug)
        if event is None:
            raise EventNotFoundError(slug)
        return event
