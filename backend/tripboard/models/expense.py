"""
Expense model for shared trip spending.
"""
from sqlalchemy import Column, String, Numeric, ForeignKey, Integer
from sqlalchemy.orm import relationship
from tripboard.db.base import BaseModel
import enum


class ExpenseCategory(str, enum.Enum):
    """Expense categories offered when adding an expense."""
    ACCOMMODATION = "accommodation"
    FOOD = "food"
    TRANSPORTATION = "transportation"
    ACTIVITIES = "activities"
    SHOPPING = "shopping"
    OTHER = "other"


class Expense(BaseModel):
    """Expense model; amounts are in trip-native units."""
    __tablename__ = "expenses"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    item = Column(String(200), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    category = Column(String(50), nullable=False, default=ExpenseCategory.OTHER.value)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    # Relationships
    trip = relationship("Trip", back_populates="expenses")
    created_by = relationship("User", foreign_keys=[created_by_id])
