"""
Pydantic schemas passed between the gamification components.
"""
from typing import Dict, Optional
from pydantic import BaseModel, Field


class ProgressResult(BaseModel):
    """Outcome of a progress upsert."""
    id: int
    created: bool = False
    updated: bool = False
    completion_percentage: float
    score: int
    attempts: int
    time_spent: int


class SubjectSummary(BaseModel):
    """Aggregate of a student's progress records in one subject."""
    subject: str
    total_topics: int = 0
    avg_completion: float = 0.0
    avg_score: float = 0.0
    total_time_spent: int = 0
    completed_topics: int = 0


class UserStats(BaseModel):
    """Snapshot the achievement rules are evaluated against."""
    total_points: int = 0
    daily_streak: int = 0
    total_activities: int = 0
    completed_activities: int = 0
    avg_score: float = 0.0
    high_score_count: int = 0
    unique_games_played: int = 0
    total_games_played: int = 0
    highest_game_score: int = 0
    subject_completed_topics: Dict[str, int] = Field(default_factory=dict)


class GameScoreResult(BaseModel):
    """Outcome of a game score submission."""
    entry_id: int
    score: int
    points_earned: int
    is_new_record: bool
    best_score: int
    total_plays: int


class LeaderboardEntry(BaseModel):
    """One row of the points leaderboard."""
    rank: int
    id: int
    username: str
    full_name: str
    avatar_url: Optional[str] = None
    total_points: int
    current_level: int
    subject_points: Optional[int] = None
