from sqlalchemy import Column, String, Text, DateTime, JSON, Uuid, func, Index
import uuid
from app.db.session import Base


class Event(Base):
    __tablename__ = "events"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(Text, nullable=False)
    slug = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    overview = Column(Text, nullable=False)
    image = Column(Text, nullable=False)
    venue = Column(Text, nullable=False)
    location = Column(Text, nullable=False)
    date = Column(String(10), nullable=False)   # YYYY-MM-DD
    time = Column(String(5), nullable=False)    # HH:MM, 24-hour
    mode = Column(Text, nullable=False)
    audience = Column(Text, nullable=False)
    agenda = Column(JSON, nullable=False)
    organizer = Column(Text, nullable=False)
    tags = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('uq_event_slug', 'slug', unique=True),
        Index('idx_event_date', 'date'),
        Index('idx_event_created_at', 'created_at'),
    )
