"""
Schemas for games.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from app.schemas.achievement import Achievement


class GameScoreSubmit(BaseModel):
    """Schema for a finished game attempt."""

    score: int = Field(..., ge=0, le=1000)
    level_completed: int = Field(1, ge=1, le=10)
    time_taken: int = Field(0, ge=0, description="Seconds, 0 when unknown")
    game_data: Optional[Dict[str, Any]] = None


class GameScoreResponse(BaseModel):
    message: str
    score: int
    pointsEarned: int
    isNewRecord: bool
    bestScore: int
    totalPlays: int
    newAchievements: List[Achievement] = []


class PreviousScore(BaseModel):
    id: int
    score: int
    level_completed: Optional[int] = None
    time_taken: Optional[int] = None
    points_earned: Optional[int] = None
    played_at: Optional[datetime] = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class GameConfigResponse(BaseModel):
    gameId: str
    subject: str
    config: Dict[str, Any]
    previousScores: List[PreviousScore]
    highScore: int
