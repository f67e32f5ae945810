"""Database models package."""
from app.db.models.event import Event
from app.db.models.booking import Booking

__all__ = ["Event", "Booking"]
