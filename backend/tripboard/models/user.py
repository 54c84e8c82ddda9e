"""
User model mirroring profiles from the identity provider.
"""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from tripboard.db.base import BaseModel


class User(BaseModel):
    """User profile used for attribution (name, avatar)."""
    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    avatar_url = Column(String(500), nullable=True)

    # Relationships
    owned_trips = relationship("Trip", back_populates="owner")
    collaborations = relationship("TripCollaborator", back_populates="user", cascade="all, delete-orphan")
