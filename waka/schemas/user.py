from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from waka.schemas.track import TrackResponse


class UserSummary(BaseModel):
    """Public profile fields shown next to a portfolio."""
    id: int
    username: str
    bio: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class PortfolioResponse(BaseModel):
    """
    A user's profile and their uploads.

    `user` is null when the id is unknown; a known user with no uploads
    has a profile and an empty `portfolio`.
    """
    user: Optional[UserSummary] = None
    portfolio: list[TrackResponse] = []
