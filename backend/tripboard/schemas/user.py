"""
Pydantic schemas for user references.
"""
from pydantic import BaseModel
from typing import Optional


class UserRef(BaseModel):
    """A user as known to the workspace: identity plus display profile."""
    id: str
    name: str
    username: Optional[str] = None
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True
