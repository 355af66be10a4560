"""
Event model
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import relationship

from app.core.db import Base

def _new_id() -> str:
    return str(uuid.uuid4())

class Event(Base):
    __tablename__ = "events"
    
    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(128), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    sport_type = Column(String(50), nullable=False, index=True)
    date_time = Column(DateTime, nullable=False, index=True)  # naive UTC
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    
    # Relationships
    venues = relationship(
        "Venue",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="Venue.created_at",
    )
