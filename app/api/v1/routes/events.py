from fastapi import APIRouter, Depends, status
from app.schemas import EventCreate, EventUpdate, EventOut, EventCard, BookingOut
from app.db.session import get_session
from app.services.event_service import EventService
from app.services.booking_service import BookingService
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

router = APIRouter(prefix="/events", tags=["events"])

def get_event_service(session: AsyncSession = Depends(get_session)) -> EventService:
    return EventService(session)

def get_booking_service(session: AsyncSession = Depends(get_session)) -> BookingService:
    return BookingService(session)

@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    payload: EventCreate,
    event_service: EventService = Depends(get_event_service)
):
    """
    Create an event. The slug is derived from the title; date and time are
    stored as YYYY-MM-DD and HH:MM (24-hour).
    """
    return await event_service.create_event(payload)

@router.get("/", response_model=List[EventCard])
async def list_events(event_service: EventService = Depends(get_event_service)):
    """List all events as cards for the listing page."""
    return await event_service.list_events()

@router.get("/featured", response_model=List[EventCard])
async def list_featured_events(event_service: EventService = Depends(get_event_service)):
    return event_service.featured_events()

@router.get("/{slug}", response_model=EventOut)
async def get_event_detail(
    slug: str,
    event_service: EventService = Depends(get_event_service)
):
    return await event_service.get_event(slug)

@router.patch("/{slug}", response_model=EventOut)
async def update_event_endpoint(
    slug: str,
    payload: EventUpdate,
    event_service: EventService = Depends(get_event_service)
):
    """
    Update some fields of an event. Changing the title changes the slug, so
    the event moves to a new URL.
    """
    return await event_service.update_event(slug, payload)

@router.get("/{slug}/bookings", response_model=List[BookingOut])
async def list_event_bookings(
    slug: str,
    booking_service: BookingService = Depends(get_booking_service)
):
    return await booking_service.list_bookings_for_event(slug)
