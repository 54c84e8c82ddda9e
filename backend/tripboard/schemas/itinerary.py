"""
Pydantic schemas for itinerary stops.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import date as dt_date
from tripboard.models.itinerary import StopStatus
from tripboard.schemas.user import UserRef


class ItineraryStop(BaseModel):
    """Itinerary stop record."""
    id: str
    trip_id: str
    name: str
    activity: str = ""
    date: dt_date
    status: StopStatus = StopStatus.PLANNING
    created_by: Optional[UserRef] = None


class StopCreate(BaseModel):
    """Schema for stop creation."""
    name: str = ""
    activity: str = ""
    date: Optional[dt_date] = None


class StopUpdate(BaseModel):
    """Schema for stop update; only provided fields are merged."""
    name: Optional[str] = None
    activity: Optional[str] = None
    date: Optional[dt_date] = None
    status: Optional[StopStatus] = None


class StopStatusUpdate(BaseModel):
    """Schema for an explicit status transition."""
    status: StopStatus


class StopProgress(BaseModel):
    """Completion progress across stops."""
    completed_count: int
    total_count: int
    percentage: int


class DayStop(BaseModel):
    """A stop with its one-based position label."""
    day_label: str
    stop: ItineraryStop


class ItinerarySummary(BaseModel):
    """Itinerary portion of the trip view."""
    status_filter: str = "all"
    stops: List[DayStop] = []
    progress: StopProgress
