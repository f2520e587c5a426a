"""
Achievement evaluator.
Checks the catalog against a fresh stats snapshot and grants unlocks once.
"""
import logging
import math
from typing import Any, Dict, List, Optional

from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.gamification.rules import AchievementRule, RuleKind
from app.core.gamification.schemas import UserStats
from app.models.achievement import Achievement, AchievementGrant
from app.models.game_score import GameScoreEntry
from app.models.points import PointsAccount
from app.models.progress import ProgressRecord

logger = logging.getLogger(__name__)

HIGH_SCORE_THRESHOLD = 90


class AchievementEvaluator:
    """
    Grants achievements whose rule is satisfied.
    Never touches points; the caller runs it after each points-affecting event.
    """

    def __init__(self, db: Session):
        self.db = db

    def check_and_award(self, user_id: int) -> List[Achievement]:
        """
        Evaluate every achievement the user has not earned yet.

        Args:
            user_id: User ID

        Returns:
            Achievements granted by this call, in catalog order
        """
        earned_ids = self._earned_ids(user_id)
        stats = self.compute_stats(user_id)

        newly_granted = []
        for achievement in self.catalog():
            if achievement.id in earned_ids:
                continue
            rule = AchievementRule.for_achievement(achievement)
            if rule.is_satisfied(stats) and self.grant(user_id, achievement.id):
                newly_granted.append(achievement)

        if newly_granted:
            logger.info(
                f"User {user_id} unlocked: {', '.join(a.name for a in newly_granted)}"
            )
        return newly_granted

    def grant(self, user_id: int, achievement_id: int) -> bool:
        """Record a grant. Returns False when the user already has it."""
        existing = self.db.query(AchievementGrant.id).filter(
            AchievementGrant.user_id == user_id,
            AchievementGrant.achievement_id == achievement_id,
        ).first()
        if existing:
            return False

        self.db.add(AchievementGrant(user_id=user_id, achievement_id=achievement_id))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Achievement {achievement_id} already granted to user {user_id}")
            return False
        return True

    def compute_stats(self, user_id: int) -> UserStats:
        account = self.db.query(PointsAccount).filter(PointsAccount.user_id == user_id).first()

        progress = self.db.query(
            func.count(ProgressRecord.id).label("total_activities"),
            func.sum(case((ProgressRecord.completion_percentage >= 100, 1), else_=0)).label("completed"),
            func.avg(ProgressRecord.score).label("avg_score"),
            func.sum(case((ProgressRecord.score >= HIGH_SCORE_THRESHOLD, 1), else_=0)).label("high_scores"),
        ).filter(ProgressRecord.student_id == user_id).one()

        games = self.db.query(
            func.count(func.distinct(GameScoreEntry.game_id)).label("unique_games"),
            func.count(GameScoreEntry.id).label("total_games"),
            func.max(GameScoreEntry.score).label("highest"),
        ).filter(GameScoreEntry.user_id == user_id).one()

        per_subject = self.db.query(
            ProgressRecord.subject,
            func.sum(case((ProgressRecord.completion_percentage >= 100, 1), else_=0)),
        ).filter(ProgressRecord.student_id == user_id).group_by(ProgressRecord.subject).all()

        return UserStats(
            total_points=account.total_points if account else 0,
            daily_streak=account.daily_streak if account else 0,
            total_activities=int(progress.total_activities or 0),
            completed_activities=int(progress.completed or 0),
            avg_score=float(progress.avg_score or 0),
            high_score_count=int(progress.high_scores or 0),
            unique_games_played=int(games.unique_games or 0),
            total_games_played=int(games.total_games or 0),
            highest_game_score=int(games.highest or 0),
            subject_completed_topics={subject: int(count or 0) for subject, count in per_subject},
        )

    def catalog(self) -> List[Achievement]:
        return self.db.query(Achievement).order_by(
            Achievement.category, Achievement.points_required, Achievement.id
        ).all()

    def earned(self, user_id: int) -> List[Dict[str, Any]]:
        """Achievements the user holds, most recent first."""
        rows = self.db.query(Achievement, AchievementGrant.earned_at).join(
            AchievementGrant, AchievementGrant.achievement_id == Achievement.id
        ).filter(AchievementGrant.user_id == user_id).order_by(
            AchievementGrant.earned_at.desc(), AchievementGrant.id.desc()
        ).all()
        return [self._as_dict(achievement, earned_at) for achievement, earned_at in rows]

    def progress(self, user_id: int) -> Dict[str, Any]:
        """Full catalog with earned flags, earned entries first, plus a summary."""
        earned_at_by_id = dict(
            self.db.query(AchievementGrant.achievement_id, AchievementGrant.earned_at).filter(
                AchievementGrant.user_id == user_id
            ).all()
        )
        entries = [
            self._as_dict(achievement, earned_at_by_id.get(achievement.id), achievement.id in earned_at_by_id)
            for achievement in self.catalog()
        ]
        entries.sort(key=lambda entry: not entry["earned"])

        earned_count = len(earned_at_by_id)
        total = len(entries)
        return {
            "achievements": entries,
            "summary": {
                "earned": earned_count,
                "total": total,
                "percentage": math.floor(earned_count * 100 / total + 0.5) if total > 0 else 0,
            },
        }

    def add_custom(
        self,
        name: str,
        description: Optional[str],
        badge_icon: Optional[str],
        points_required: int,
        category: Optional[str],
    ) -> Achievement:
        """Add an admin-defined achievement unlocked by total points."""
        achievement = Achievement(
            name=name,
            description=description,
            badge_icon=badge_icon,
            points_required=points_required,
            category=category,
            rule_kind=None,
        )
        self.db.add(achievement)
        self.db.commit()
        self.db.refresh(achievement)
        logger.info(f"Custom achievement '{name}' added ({RuleKind.TOTAL_POINTS.value} >= {points_required})")
        return achievement

    def _earned_ids(self, user_id: int) -> set:
        return {
            row[0] for row in self.db.query(AchievementGrant.achievement_id).filter(
                AchievementGrant.user_id == user_id
            ).all()
        }

    @staticmethod
    def _as_dict(achievement: Achievement, earned_at=None, earned: bool = True) -> Dict[str, Any]:
        return {
            "id": achievement.id,
            "name": achievement.name,
            "description": achievement.description,
            "badge_icon": achievement.badge_icon,
            "points_required": achievement.points_required,
            "category": achievement.category,
            "earned": earned,
            "earned_at": earned_at,
        }
