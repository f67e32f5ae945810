from pydantic import BaseModel
from typing import Optional, List
from uuid import UUID
from datetime import datetime


EVENT_TEXT_FIELDS = (
    "title",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "mode",
    "audience",
    "organizer",
)
EVENT_LIST_FIELDS = ("agenda", "tags")


class EventCreate(BaseModel):
    """
    Incoming event payload.

    Every field is optional at this layer so that missing values surface as
    RequiredFieldError from the validator rather than a schema error. The
    slug is never accepted from clients; it is derived from the title.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    overview: Optional[str] = None
    image: Optional[str] = None
    venue: Optional[str] = None
    location: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    mode: Optional[str] = None
    audience: Optional[str] = None
    agenda: Optional[List[str]] = None
    organizer: Optional[str] = None
    tags: Optional[List[str]] = None


class EventUpdate(EventCreate):
    """Partial event payload; only fields present in the request are applied."""


class PreparedEvent(BaseModel):
    """A validated, canonical event ready to be persisted."""
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    agenda: List[str]
    organizer: str
    tags: List[str]

    class Config:
        from_attributes = True


class EventOut(PreparedEvent):
    id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    bookings_count: Optional[int] = None


class EventCard(BaseModel):
    """The subset of an event rendered as a card on the listing page."""
    title: str
    image: str
    slug: str
    location: str
    date: str
    time: str

    class Config:
        from_attributes = True


class BookingCreate(BaseModel):
    event_id: Optional[str] = None
    email: Optional[str] = None


class BookingUpdate(BookingCreate):
    """Partial booking payload; only fields present in the request are applied."""


class PreparedBooking(BaseModel):
    """A validated booking whose event reference has been checked."""
    event_id: UUID
    email: str

    class Config:
        from_attributes = True


class BookingOut(PreparedBooking):
    id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
