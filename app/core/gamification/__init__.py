"""
Points, levels, streaks, achievements and game scores.
"""
from .achievement_evaluator import AchievementEvaluator
from .activity import ActivityService
from .errors import GamificationInputError, UnknownGameError, UnknownSubjectError
from .game_score_recorder import GameScoreRecorder
from .points_engine import PointsEngine
from .progress_tracker import ProgressTracker
from .rules import AchievementRule, RuleKind

__all__ = [
    "AchievementEvaluator",
    "AchievementRule",
    "ActivityService",
    "GameScoreRecorder",
    "GamificationInputError",
    "PointsEngine",
    "ProgressTracker",
    "RuleKind",
    "UnknownGameError",
    "UnknownSubjectError",
]
