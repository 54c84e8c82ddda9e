"""
Pydantic schemas for Trip entity and the composed trip view.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import date
from decimal import Decimal
from tripboard.models.trip import TripStatus, CollaboratorRole, CollaboratorStatus
from tripboard.schemas.user import UserRef
from tripboard.schemas.itinerary import ItinerarySummary
from tripboard.schemas.expense import ExpenseSummary
from tripboard.schemas.packing import PackingSummary


class Collaborator(BaseModel):
    """Roster entry for a trip."""
    user: UserRef
    role: CollaboratorRole = CollaboratorRole.EDITOR
    status: CollaboratorStatus = CollaboratorStatus.PENDING


class Trip(BaseModel):
    """Trip record."""
    id: str
    title: str
    destination: str = ""
    country: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: TripStatus = TripStatus.PLANNING
    budget: Optional[Decimal] = None
    owner: UserRef
    collaborators: List[Collaborator] = []


class TripStatusUpdate(BaseModel):
    """Schema for trip status update."""
    status: TripStatus


class BudgetUpdate(BaseModel):
    """Schema for budget update."""
    budget: Decimal


class CollaboratorInvite(BaseModel):
    """Schema for collaborator invitation."""
    username: str
    role: str = "editor"


class TeamSummary(BaseModel):
    """Owner plus accepted collaborators."""
    owner: UserRef
    members: List[UserRef] = []
    member_count: int


class TripView(BaseModel):
    """Everything the trip-detail surface and document export need."""
    trip: Trip
    team: TeamSummary
    itinerary: ItinerarySummary
    expenses: ExpenseSummary
    packing: PackingSummary
