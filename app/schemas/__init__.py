"""Schemas module - Import all schemas."""
from app.schemas.user import User, UserCreate, UserLogin, UserUpdate, UserProfile, AuthResponse
from app.schemas.achievement import (
    Achievement,
    AchievementCreate,
    AchievementProgress,
    AchievementSummary,
    AchievementsResponse,
)
from app.schemas.progress import (
    ProgressSubmit,
    ProgressSubmitResponse,
    PointsSummary,
    StudentDashboard,
    SubjectDetail,
    SubjectOverview,
    TopicProgress,
)
from app.schemas.game import GameScoreSubmit, GameScoreResponse, GameConfigResponse
from app.schemas.teacher import ClassCreate, ClassOut, EnrollRequest, EnrollmentOut
from app.schemas.common import Message

__all__ = [
    "User",
    "UserCreate",
    "UserLogin",
    "UserUpdate",
    "UserProfile",
    "AuthResponse",
    "Achievement",
    "AchievementCreate",
    "AchievementProgress",
    "AchievementSummary",
    "AchievementsResponse",
    "ProgressSubmit",
    "ProgressSubmitResponse",
    "PointsSummary",
    "StudentDashboard",
    "SubjectDetail",
    "SubjectOverview",
    "TopicProgress",
    "GameScoreSubmit",
    "GameScoreResponse",
    "GameConfigResponse",
    "ClassCreate",
    "ClassOut",
    "EnrollRequest",
    "EnrollmentOut",
    "Message",
]
