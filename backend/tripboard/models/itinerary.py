"""
Itinerary stop model.
"""
from sqlalchemy import Column, String, Date, Text, Enum as SQLEnum, ForeignKey, Integer
from sqlalchemy.orm import relationship
from tripboard.db.base import BaseModel
import enum


class StopStatus(str, enum.Enum):
    """Stop status; any state may move to any other."""
    PLANNING = "planning"
    TRAVELING = "traveling"
    COMPLETED = "completed"


class ItineraryStop(BaseModel):
    """A single stop on the trip itinerary. Ordered by insertion (id)."""
    __tablename__ = "itinerary_stops"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    activity = Column(Text, nullable=True)
    date = Column(Date, nullable=False, index=True)
    status = Column(SQLEnum(StopStatus), default=StopStatus.PLANNING, nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Relationships
    trip = relationship("Trip", back_populates="stops")
    created_by = relationship("User", foreign_keys=[created_by_id])
