"""
Schemas for student progress and points endpoints.
"""
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.core.gamification.schemas import ProgressResult, SubjectSummary
from app.schemas.achievement import Achievement


class ProgressSubmit(BaseModel):
    """Schema for recording topic progress."""

    subject: str
    topic: str = Field(..., min_length=1, max_length=100)
    completion_percentage: float = Field(..., ge=0, le=100)
    score: int = Field(0, ge=0, le=100)
    time_spent: int = Field(0, ge=0, description="Seconds spent in this attempt")


class ProgressSubmitResponse(BaseModel):
    message: str
    progress: ProgressResult
    pointsEarned: int
    newAchievements: List[Achievement]


class TopicProgress(BaseModel):
    name: str
    completion_percentage: float = 0
    score: int = 0
    attempts: int = 0
    time_spent: int = 0
    last_accessed: Optional[datetime] = None


class SubjectOverview(BaseModel):
    name: str
    displayName: str
    progress: SubjectSummary


class SubjectDetail(BaseModel):
    subject: str
    progress: SubjectSummary
    topics: List[TopicProgress]


class RecentActivity(BaseModel):
    subject: str
    topic: str
    completion_percentage: float
    score: int
    last_accessed: Optional[datetime] = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class PointsSummary(BaseModel):
    total_points: int = 0
    current_level: int = 1
    subject_points: Dict[str, int] = Field(default_factory=dict)
    daily_streak: int = 0
    last_activity_date: Optional[date] = None
    next_level_points: int = 100


class StudentDashboard(BaseModel):
    progress: List[SubjectSummary]
    recentActivity: List[RecentActivity]
    userPoints: PointsSummary
    recentAchievements: List[Achievement]
    leaderboardPosition: Optional[int] = None
    totalStudents: int
