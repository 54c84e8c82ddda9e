"""
Pydantic schemas for packing list items and derived progress.
"""
from pydantic import BaseModel
from typing import List, Optional
from tripboard.schemas.user import UserRef


class PackingItem(BaseModel):
    """Packing item record."""
    id: str
    trip_id: str
    name: str
    notes: Optional[str] = None
    quantity: int = 1
    category: str = "other"
    is_packed: bool = False
    created_by: Optional[UserRef] = None
    packed_by: Optional[UserRef] = None


class PackingItemCreate(BaseModel):
    """Schema for packing item creation."""
    name: str = ""
    category: str = "clothing"
    quantity: int = 1
    notes: Optional[str] = None


class PackingItemUpdate(BaseModel):
    """Schema for packing item update."""
    name: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[int] = None
    notes: Optional[str] = None


class QuantityUpdate(BaseModel):
    """Schema for quantity stepper updates."""
    quantity: int


class PackingProgress(BaseModel):
    """Packed/total progress."""
    packed_count: int
    total_count: int
    percentage: int


class PackingCategoryGroup(BaseModel):
    """All items of one category, as shown on the checklist."""
    category: str
    label: str
    items: List[PackingItem] = []
    packed_count: int = 0
    unpacked_count: int = 0


class PackingContributor(BaseModel):
    """How many items one user has packed."""
    user_id: str
    name: str
    avatar_url: Optional[str] = None
    count: int


class PackingSummary(BaseModel):
    """Packing portion of the trip view."""
    progress: PackingProgress
    groups: List[PackingCategoryGroup] = []
    contributors: List[PackingContributor] = []
