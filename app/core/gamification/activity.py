"""
Activity service: runs tracker, points engine and achievement evaluator in order.
"""
import logging
from datetime import date
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.core.gamification.achievement_evaluator import AchievementEvaluator
from app.core.gamification.game_score_recorder import GameScoreRecorder
from app.core.gamification.points_engine import (
    PointsEngine,
    first_completion_points,
    repeat_update_points,
)
from app.core.gamification.progress_tracker import ProgressTracker

logger = logging.getLogger(__name__)


class ActivityService:
    """
    Entry point for points-affecting student activity.

    Each step commits its own work; a failure part way through leaves the
    earlier steps applied.
    """

    def __init__(self, db: Session):
        self.db = db
        self.tracker = ProgressTracker(db)
        self.points = PointsEngine(db)
        self.achievements = AchievementEvaluator(db)
        self.games = GameScoreRecorder(db, points_engine=self.points)

    def submit_progress(
        self,
        student_id: int,
        subject: str,
        topic: str,
        completion_percentage: float,
        score: int = 0,
        time_spent: int = 0,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        """
        Record topic progress and award points for it.

        The first attempt earns completion plus score bonus points. Repeat
        attempts earn the improvement formula, which can be zero or negative;
        only positive amounts are applied to the account.
        """
        result = self.tracker.record_progress(
            student_id, subject, topic, completion_percentage, score, time_spent
        )

        if result.created:
            points_earned = first_completion_points(completion_percentage, score)
        else:
            points_earned = repeat_update_points(completion_percentage)

        if points_earned > 0:
            self.points.apply_points(student_id, subject, points_earned, today=today)

        new_achievements = self.achievements.check_and_award(student_id)
        return {
            "progress": result,
            "points_earned": points_earned,
            "new_achievements": new_achievements,
        }

    def submit_game_score(
        self,
        student_id: int,
        subject: str,
        game_id: str,
        score: int,
        level_completed: int = 1,
        time_taken: int = 0,
        game_data: Optional[Dict[str, Any]] = None,
        award_points: bool = True,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        result = self.games.submit_score(
            student_id,
            subject,
            game_id,
            score,
            level_completed=level_completed,
            time_taken=time_taken,
            game_data=game_data,
            award_points=award_points,
            today=today,
        )
        new_achievements = self.achievements.check_and_award(student_id) if award_points else []
        return {"result": result, "new_achievements": new_achievements}
