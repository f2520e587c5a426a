"""Models module - Import all models here for Alembic."""
from app.db.base import Base
from app.models.user import User
from app.models.classroom import Classroom, ClassEnrollment
from app.models.progress import ProgressRecord
from app.models.points import PointsAccount, SubjectPoints
from app.models.achievement import Achievement, AchievementGrant
from app.models.game_score import GameScoreEntry

__all__ = ["Base", "User", "Classroom", "ClassEnrollment", "ProgressRecord", "PointsAccount", "SubjectPoints", "Achievement", "AchievementGrant", "GameScoreEntry"]
