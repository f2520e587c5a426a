"""
Schemas for achievements.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class Achievement(BaseModel):
    """Catalog entry as shown to users."""

    id: int
    name: str
    description: Optional[str] = None
    badge_icon: Optional[str] = None
    points_required: Optional[int] = 0
    category: Optional[str] = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class AchievementProgress(Achievement):
    earned: bool = False
    earned_at: Optional[datetime] = None


class AchievementSummary(BaseModel):
    earned: int
    total: int
    percentage: int


class AchievementsResponse(BaseModel):
    achievements: List[AchievementProgress]
    summary: AchievementSummary


class AchievementCreate(BaseModel):
    """Custom achievement, unlocked once the user's total points reach points_required."""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    badge_icon: Optional[str] = None
    points_required: int = Field(..., ge=0)
    category: Optional[str] = Field(None, max_length=50)
