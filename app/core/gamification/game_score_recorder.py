"""
Game score recorder.
Appends game attempts and awards the tiered score bonus through the points engine.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.catalog import find_game, is_valid_subject
from app.core.gamification.errors import GamificationInputError, UnknownGameError, UnknownSubjectError
from app.core.gamification.points_engine import PointsEngine, game_score_points
from app.core.gamification.schemas import GameScoreResult
from app.models.game_score import GameScoreEntry
from app.models.user import User

logger = logging.getLogger(__name__)

MAX_GAME_SCORE = 1000
MAX_GAME_LEVEL = 10


class GameScoreRecorder:
    """Records game attempts. Entries are never updated or deleted."""

    def __init__(self, db: Session, points_engine: Optional[PointsEngine] = None):
        self.db = db
        self.points_engine = points_engine or PointsEngine(db)

    def submit_score(
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
    ) -> GameScoreResult:
        """
        Append a game attempt and award points for it.

        Args:
            student_id: Player ID
            subject: Subject the game belongs to
            game_id: Game identifier within the subject's catalog
            score: 0-1000
            level_completed: 1-10
            time_taken: Seconds, 0 when unknown
            game_data: Free-form game state
            award_points: False to store the attempt without touching points
            today: Activity date used for the streak

        Returns:
            GameScoreResult with points earned and record information

        Raises:
            GamificationInputError: Out-of-range input
            UnknownGameError: Game not in the subject's catalog
        """
        self._validate(subject, game_id, score, level_completed, time_taken, game_data)

        points_earned = game_score_points(score, time_taken)
        entry = GameScoreEntry(
            user_id=student_id,
            game_id=game_id,
            subject=subject,
            score=score,
            level_completed=level_completed,
            time_taken=time_taken,
            points_earned=points_earned,
            game_data=game_data or {},
        )
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)

        if award_points:
            self.points_engine.apply_points(student_id, subject, points_earned, today=today)

        best_score, total_plays = self.db.query(
            func.max(GameScoreEntry.score), func.count(GameScoreEntry.id)
        ).filter(
            GameScoreEntry.user_id == student_id,
            GameScoreEntry.game_id == game_id,
        ).one()

        logger.info(
            f"User {student_id} scored {score} in {subject}/{game_id} "
            f"(+{points_earned} points, best={best_score}, plays={total_plays})"
        )
        return GameScoreResult(
            entry_id=entry.id,
            score=score,
            points_earned=points_earned,
            is_new_record=score == best_score,
            best_score=best_score,
            total_plays=total_plays,
        )

    def scores_for_game(self, user_id: int, game_id: str) -> List[GameScoreEntry]:
        """Previous attempts at a game, newest first."""
        return self.db.query(GameScoreEntry).filter(
            GameScoreEntry.user_id == user_id,
            GameScoreEntry.game_id == game_id,
        ).order_by(GameScoreEntry.played_at.desc(), GameScoreEntry.id.desc()).all()

    def game_leaderboard(self, game_id: str, subject: str, limit: int = 10) -> List[Dict[str, Any]]:
        """Best score per active player, ties broken by the fastest time."""
        best_score = func.max(GameScoreEntry.score).label("best_score")
        best_time = func.min(GameScoreEntry.time_taken).label("best_time")
        rows = self.db.query(
            User.id,
            User.username,
            User.full_name,
            User.avatar_url,
            best_score,
            func.max(GameScoreEntry.level_completed).label("highest_level"),
            best_time,
            func.count(GameScoreEntry.id).label("total_plays"),
        ).join(User, GameScoreEntry.user_id == User.id).filter(
            GameScoreEntry.game_id == game_id,
            GameScoreEntry.subject == subject,
            User.is_active.is_(True),
        ).group_by(
            User.id, User.username, User.full_name, User.avatar_url
        ).order_by(best_score.desc(), best_time.asc()).limit(limit).all()

        return [
            {
                "rank": rank,
                "id": row.id,
                "username": row.username,
                "full_name": row.full_name,
                "avatar_url": row.avatar_url,
                "best_score": row.best_score,
                "highest_level": row.highest_level,
                "best_time": row.best_time,
                "total_plays": row.total_plays,
            }
            for rank, row in enumerate(rows, start=1)
        ]

    def user_game_stats(self, user_id: int, subject: Optional[str] = None) -> List[Dict[str, Any]]:
        query = self.db.query(
            GameScoreEntry.subject,
            GameScoreEntry.game_id,
            func.count(GameScoreEntry.id).label("total_plays"),
            func.max(GameScoreEntry.score).label("best_score"),
            func.avg(GameScoreEntry.score).label("avg_score"),
            func.max(GameScoreEntry.level_completed).label("highest_level"),
            func.min(GameScoreEntry.time_taken).label("best_time"),
            func.sum(GameScoreEntry.points_earned).label("total_points"),
        ).filter(GameScoreEntry.user_id == user_id)
        if subject:
            query = query.filter(GameScoreEntry.subject == subject)

        rows = query.group_by(GameScoreEntry.subject, GameScoreEntry.game_id).order_by(
            GameScoreEntry.subject, GameScoreEntry.game_id
        ).all()
        return [
            {
                "subject": row.subject,
                "game_id": row.game_id,
                "total_plays": row.total_plays,
                "best_score": row.best_score,
                "avg_score": float(row.avg_score or 0),
                "highest_level": row.highest_level,
                "best_time": row.best_time,
                "total_points": int(row.total_points or 0),
            }
            for row in rows
        ]

    @staticmethod
    def _validate(subject, game_id, score, level_completed, time_taken, game_data) -> None:
        if not is_valid_subject(subject):
            raise UnknownSubjectError(subject)
        if not 0 <= score <= MAX_GAME_SCORE:
            raise GamificationInputError("score", f"Score must be between 0 and {MAX_GAME_SCORE}", score)
        if not 1 <= level_completed <= MAX_GAME_LEVEL:
            raise GamificationInputError("level_completed", f"Level must be between 1 and {MAX_GAME_LEVEL}", level_completed)
        if time_taken < 0:
            raise GamificationInputError("time_taken", "Time taken must be non-negative", time_taken)
        if game_data is not None and not isinstance(game_data, dict):
            raise GamificationInputError("game_data", "Game data must be an object", None)
        if find_game(subject, game_id) is None:
            raise UnknownGameError(subject, game_id)
