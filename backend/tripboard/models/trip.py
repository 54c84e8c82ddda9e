"""
Trip model for collaborative trip planning.
"""
from sqlalchemy import Column, String, Date, Numeric, Enum as SQLEnum, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from tripboard.db.base import BaseModel
import enum


class TripStatus(str, enum.Enum):
    """Trip status enumeration. Manually asserted by the owner, never derived."""
    PLANNING = "planning"
    TRAVELING = "traveling"
    COMPLETED = "completed"


class CollaboratorRole(str, enum.Enum):
    """Collaborator role enumeration."""
    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"


class CollaboratorStatus(str, enum.Enum):
    """Invitation acceptance status."""
    PENDING = "pending"
    ACCEPTED = "accepted"


class Trip(BaseModel):
    """Trip model; the owner is the creator, not a roster entry."""
    __tablename__ = "trips"

    title = Column(String(200), nullable=False)
    destination = Column(String(200), nullable=False, default="")
    country = Column(String(100), nullable=False, default="")
    start_date = Column(Date, nullable=True, index=True)
    end_date = Column(Date, nullable=True, index=True)
    status = Column(SQLEnum(TripStatus), default=TripStatus.PLANNING, nullable=False)
    budget = Column(Numeric(15, 2), nullable=True)  # NULL means no budget set
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    owner = relationship("User", back_populates="owned_trips")
    collaborators = relationship("TripCollaborator", back_populates="trip", cascade="all, delete-orphan")
    stops = relationship("ItineraryStop", back_populates="trip", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="trip", cascade="all, delete-orphan")
    packing_items = relationship("PackingItem", back_populates="trip", cascade="all, delete-orphan")


class TripCollaborator(BaseModel):
    """Junction table for Trip and User roster membership."""
    __tablename__ = "trip_collaborators"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role = Column(SQLEnum(CollaboratorRole), default=CollaboratorRole.EDITOR, nullable=False)
    status = Column(SQLEnum(CollaboratorStatus), default=CollaboratorStatus.PENDING, nullable=False)

    # Relationships
    trip = relationship("Trip", back_populates="collaborators")
    user = relationship("User", back_populates="collaborations")

    # Unique constraint: one roster entry per user per trip
    __table_args__ = (
        UniqueConstraint('trip_id', 'user_id', name='uq_trip_user_collaborator'),
    )
