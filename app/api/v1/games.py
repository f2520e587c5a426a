"""
Game endpoints: catalog, configuration, score submission and leaderboards.
"""
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.catalog import GAME_CONFIGS, GAMES, is_valid_subject
from app.core.config import settings
from app.core.dependencies import get_current_active_user, get_db
from app.core.exceptions import InvalidSubjectError, NotFoundError
from app.core.gamification import ActivityService, GameScoreRecorder
from app.models.user import User
from app.schemas.game import GameConfigResponse, GameScoreResponse, GameScoreSubmit

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def list_games(
    subject: Optional[str] = None,
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """
    Get the game catalog.

    Args:
        subject: Only this subject's games; unknown subjects return the full catalog

    Returns:
        Games for the subject, or all games keyed by subject
    """
    if subject and subject in GAMES:
        return {"games": GAMES[subject]}
    return {"games": GAMES}


@router.get("/stats")
def game_stats(
    subject: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """Get the user's per-game statistics, grouped by subject and game."""
    return {"stats": GameScoreRecorder(db).user_game_stats(current_user.id, subject)}


@router.get("/{subject}/{game_id}", response_model=GameConfigResponse)
def game_config(
    subject: str,
    game_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """
    Get a game's configuration with the user's previous scores.

    Raises:
        InvalidSubjectError: Unknown subject
        NotFoundError: No configuration for the game
    """
    if not is_valid_subject(subject):
        raise InvalidSubjectError(subject)

    config = GAME_CONFIGS.get(game_id)
    if config is None:
        raise NotFoundError("Game", game_id)

    previous_scores = GameScoreRecorder(db).scores_for_game(current_user.id, game_id)
    return {
        "gameId": game_id,
        "subject": subject,
        "config": config,
        "previousScores": previous_scores,
        "highScore": max((entry.score for entry in previous_scores), default=0),
    }


@router.post("/{subject}/{game_id}/score", response_model=GameScoreResponse)
def submit_score(
    subject: str,
    game_id: str,
    score_in: GameScoreSubmit,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """
    Submit a finished game attempt.

    Points are only awarded to students; other roles can play without
    affecting the leaderboard.

    Args:
        subject: Subject the game belongs to
        game_id: Game identifier
        score_in: Score, level, time taken and game state

    Returns:
        Points earned, record flag, best score and play count

    Raises:
        InvalidSubjectError: Unknown subject
    """
    if not is_valid_subject(subject):
        raise InvalidSubjectError(subject)

    outcome = ActivityService(db).submit_game_score(
        current_user.id,
        subject,
        game_id,
        score_in.score,
        level_completed=score_in.level_completed,
        time_taken=score_in.time_taken,
        game_data=score_in.game_data,
        award_points=current_user.is_student,
    )
    result = outcome["result"]
    return {
        "message": "Score submitted successfully",
        "score": result.score,
        "pointsEarned": result.points_earned,
        "isNewRecord": result.is_new_record,
        "bestScore": result.best_score,
        "totalPlays": result.total_plays,
        "newAchievements": outcome["new_achievements"],
    }


@router.get("/{subject}/{game_id}/leaderboard")
def game_leaderboard(
    subject: str,
    game_id: str,
    limit: int = Query(settings.LEADERBOARD_DEFAULT_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """Get the best score per player for a game."""
    return {"leaderboard": GameScoreRecorder(db).game_leaderboard(game_id, subject, limit)}
