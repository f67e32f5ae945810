from sqlalchemy import Column, Text, DateTime, Uuid, func, Index
import uuid
from app.db.session import Base


class Booking(Base):
    __tablename__ = "bookings"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Weak reference: existence is checked on write, nothing cascades
    event_id = Column(Uuid(as_uuid=True), nullable=False)
    email = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('idx_booking_event', 'event_id'),
        Index('idx_booking_created_at', 'created_at'),
    )
