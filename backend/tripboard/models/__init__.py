"""Models package - Import all models for SQLAlchemy registration."""
from tripboard.models.user import User
from tripboard.models.trip import (
    Trip, TripCollaborator, TripStatus, CollaboratorRole, CollaboratorStatus
)
from tripboard.models.itinerary import ItineraryStop, StopStatus
from tripboard.models.expense import Expense, ExpenseCategory
from tripboard.models.packing import PackingItem, PackingCategory

__all__ = [
    "User",
    "Trip",
    "TripCollaborator",
    "TripStatus",
    "CollaboratorRole",
    "CollaboratorStatus",
    "ItineraryStop",
    "StopStatus",
    "Expense",
    "ExpenseCategory",
    "PackingItem",
    "PackingCategory",
]
