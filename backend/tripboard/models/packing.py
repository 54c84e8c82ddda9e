"""
Packing list item model.
"""
from sqlalchemy import Column, String, Text, Boolean, ForeignKey, Integer
from sqlalchemy.orm import relationship
from tripboard.db.base import BaseModel
import enum


class PackingCategory(str, enum.Enum):
    """Standard packing categories, in checklist display order."""
    CLOTHING = "clothing"
    ELECTRONICS = "electronics"
    GEAR = "gear"
    MEDICAL = "medical"
    DOCUMENTS = "documents"
    TOILETRIES = "toiletries"
    FOOD = "food"
    OTHER = "other"


class PackingItem(BaseModel):
    """Packing item; category is free text so legacy categories survive."""
    __tablename__ = "packing_items"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    notes = Column(Text, nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    category = Column(String(50), nullable=False, default=PackingCategory.OTHER.value)
    is_packed = Column(Boolean, default=False, nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    packed_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)  # Last user who marked it packed

    # Relationships
    trip = relationship("Trip", back_populates="packing_items")
    created_by = relationship("User", foreign_keys=[created_by_id])
    packed_by = relationship("User", foreign_keys=[packed_by_id])
