"""
Points, level and daily streak bookkeeping.
"""
import logging
import math
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import case
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.catalog import is_valid_subject
from app.core.gamification.errors import GamificationInputError, UnknownSubjectError
from app.core.gamification.schemas import LeaderboardEntry
from app.models.points import PointsAccount, SubjectPoints
from app.models.user import User

logger = logging.getLogger(__name__)

POINTS_PER_LEVEL = 100
SPEED_BONUS_SECONDS = 300


def level_for(total_points: int) -> int:
    return total_points // POINTS_PER_LEVEL + 1


def score_bonus(score: int) -> int:
    if score >= 80:
        return 20
    if score >= 60:
        return 10
    return 5


def first_completion_points(completion_percentage: float, score: int) -> int:
    """Points for the first recorded attempt at a topic."""
    return math.floor(completion_percentage / 10) + score_bonus(score)


def repeat_update_points(completion_percentage: float) -> int:
    """Points for a repeat attempt. Negative below 50% completion."""
    return math.floor((completion_percentage - 50) / 10) * 2


def game_score_points(score: int, time_taken: int = 0) -> int:
    """Base points plus stacking high-score bonuses and a speed bonus."""
    points = math.floor(score / 10)
    if score >= 90:
        points += 20
    if score >= 70:
        points += 10
    if 0 < time_taken < SPEED_BONUS_SECONDS:
        points += 5
    return points


def next_streak(last_activity_date: Optional[date], current_streak: int, today: date) -> int:
    """Streak value after activity on `today`."""
    if last_activity_date == today:
        return current_streak
    if last_activity_date == today - timedelta(days=1):
        return current_streak + 1
    return 1


class PointsEngine:
    """
    Applies point deltas to a student's account.

    Every mutation is issued as a single UPDATE so concurrent awards for the
    same student cannot lose an increment.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_account(self, user_id: int) -> PointsAccount:
        """Load the student's account, creating an empty one if missing."""
        self._ensure_account(user_id)
        return self.db.query(PointsAccount).filter(PointsAccount.user_id == user_id).one()

    def apply_points(
        self,
        user_id: int,
        subject: str,
        delta: int,
        today: Optional[date] = None,
    ) -> PointsAccount:
        """
        Add `delta` points to the account and refresh level and streak.

        Args:
            user_id: Student ID
            subject: One of the fixed subjects
            delta: Non-negative point delta computed by the caller
            today: Calendar date of the activity, defaults to the local date

        Returns:
            The updated PointsAccount

        Raises:
            UnknownSubjectError: subject outside the fixed set
            GamificationInputError: negative delta
        """
        if not is_valid_subject(subject):
            raise UnknownSubjectError(subject)
        if delta < 0:
            raise GamificationInputError("delta", "Point delta must be non-negative", delta)

        today = today or date.today()
        yesterday = today - timedelta(days=1)

        self._ensure_account(user_id)
        self._ensure_subject_row(user_id, subject)

        new_total = PointsAccount.total_points + delta
        self.db.query(PointsAccount).filter(PointsAccount.user_id == user_id).update(
            {
                PointsAccount.total_points: new_total,
                PointsAccount.current_level: new_total // POINTS_PER_LEVEL + 1,
                PointsAccount.daily_streak: case(
                    (PointsAccount.last_activity_date == today, PointsAccount.daily_streak),
                    (PointsAccount.last_activity_date == yesterday, PointsAccount.daily_streak + 1),
                    else_=1,
                ),
                PointsAccount.last_activity_date: today,
            },
            synchronize_session=False,
        )
        self.db.query(SubjectPoints).filter(
            SubjectPoints.user_id == user_id,
            SubjectPoints.subject == subject,
        ).update(
            {SubjectPoints.points: SubjectPoints.points + delta},
            synchronize_session=False,
        )
        self.db.commit()

        account = self.db.query(PointsAccount).filter(PointsAccount.user_id == user_id).one()
        self.db.refresh(account)
        logger.info(
            f"Awarded {delta} {subject} points to user {user_id}: "
            f"total={account.total_points} level={account.current_level} streak={account.daily_streak}"
        )
        return account

    def points_summary(self, user_id: int) -> dict:
        account = self.get_account(user_id)
        return {
            "total_points": account.total_points,
            "current_level": account.current_level,
            "subject_points": account.subject_points,
            "daily_streak": account.daily_streak,
            "last_activity_date": account.last_activity_date,
            "next_level_points": account.current_level * POINTS_PER_LEVEL,
        }

    def leaderboard(self, limit: int = 10, subject: Optional[str] = None) -> List[LeaderboardEntry]:
        """
        Active students ordered by points.

        With a subject, only students who have earned points in it are
        listed, ordered by their subject points.
        """
        query = self.db.query(User, PointsAccount).join(
            PointsAccount, PointsAccount.user_id == User.id
        ).filter(User.role == "student", User.is_active.is_(True))

        if subject:
            if not is_valid_subject(subject):
                raise UnknownSubjectError(subject)
            query = query.add_columns(SubjectPoints.points).join(
                SubjectPoints,
                (SubjectPoints.user_id == User.id) & (SubjectPoints.subject == subject),
            ).filter(SubjectPoints.points > 0).order_by(SubjectPoints.points.desc(), User.id)
        else:
            query = query.order_by(PointsAccount.total_points.desc(), User.id)

        entries = []
        for rank, row in enumerate(query.limit(limit).all(), start=1):
            user, account = row[0], row[1]
            entries.append(LeaderboardEntry(
                rank=rank,
                id=user.id,
                username=user.username,
                full_name=user.full_name,
                avatar_url=user.avatar_url,
                total_points=account.total_points,
                current_level=account.current_level,
                subject_points=row[2] if subject else None,
            ))
        return entries

    def _ensure_account(self, user_id: int) -> None:
        exists = self.db.query(PointsAccount.id).filter(PointsAccount.user_id == user_id).first()
        if exists:
            return
        self.db.add(PointsAccount(user_id=user_id, total_points=0, current_level=1, daily_streak=0))
        try:
            self.db.commit()
        except IntegrityError:
            # created by a concurrent request
            self.db.rollback()

    def _ensure_subject_row(self, user_id: int, subject: str) -> None:
        exists = self.db.query(SubjectPoints.id).filter(
            SubjectPoints.user_id == user_id,
            SubjectPoints.subject == subject,
        ).first()
        if exists:
            return
        self.db.add(SubjectPoints(user_id=user_id, subject=subject, points=0))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
