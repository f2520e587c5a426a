"""
Student endpoints: dashboard, subject progress, achievements, points and leaderboard.
"""
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.catalog import SUBJECTS, SUBJECT_TOPICS, display_name, is_valid_subject
from app.core.config import settings
from app.core.dependencies import get_current_active_user, get_db
from app.core.exceptions import InvalidSubjectError
from app.core.gamification import AchievementEvaluator, ActivityService, PointsEngine, ProgressTracker
from app.core.permissions import require_student
from app.models.user import User
from app.schemas.achievement import AchievementsResponse
from app.schemas.progress import (
    PointsSummary,
    ProgressSubmit,
    ProgressSubmitResponse,
    StudentDashboard,
    SubjectDetail,
    SubjectOverview,
    TopicProgress,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/dashboard", response_model=StudentDashboard)
def dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
) -> Any:
    """
    Get the student's dashboard.

    Returns:
        Overall progress, the 5 latest activities, points, the 3 latest
        achievements and the student's position in the top leaderboard
    """
    tracker = ProgressTracker(db)
    engine = PointsEngine(db)

    leaderboard = engine.leaderboard(limit=settings.DASHBOARD_LEADERBOARD_SIZE)
    position = next((entry.rank for entry in leaderboard if entry.id == current_user.id), None)

    return {
        "progress": tracker.overall_summary(current_user.id),
        "recentActivity": tracker.recent_activity(current_user.id, limit=5),
        "userPoints": engine.points_summary(current_user.id),
        "recentAchievements": AchievementEvaluator(db).earned(current_user.id)[:3],
        "leaderboardPosition": position,
        "totalStudents": len(leaderboard),
    }


@router.get("/subjects")
def list_subjects(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
) -> Any:
    """
    Get progress for every subject, zeros where nothing was recorded.
    """
    tracker = ProgressTracker(db)
    subjects = [
        SubjectOverview(
            name=subject,
            displayName=display_name(subject),
            progress=tracker.subject_summary(current_user.id, subject),
        )
        for subject in SUBJECTS
    ]
    return {"subjects": subjects}


@router.get("/subjects/{subject}", response_model=SubjectDetail)
def subject_detail(
    subject: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
) -> Any:
    """
    Get one subject's progress with every catalog topic.

    Args:
        subject: Subject name

    Raises:
        InvalidSubjectError: Unknown subject
    """
    if not is_valid_subject(subject):
        raise InvalidSubjectError(subject)

    tracker = ProgressTracker(db)
    records = {record.topic: record for record in tracker.list_records(current_user.id, subject)}

    topics = []
    for name in SUBJECT_TOPICS[subject]:
        record = records.get(name)
        if record is None:
            topics.append(TopicProgress(name=name))
            continue
        topics.append(TopicProgress(
            name=name,
            completion_percentage=record.completion_percentage,
            score=record.score,
            attempts=record.attempts,
            time_spent=record.time_spent,
            last_accessed=record.last_accessed,
        ))

    return {
        "subject": subject,
        "progress": tracker.subject_summary(current_user.id, subject),
        "topics": topics,
    }


@router.post("/progress", response_model=ProgressSubmitResponse)
def submit_progress(
    progress_in: ProgressSubmit,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
) -> Any:
    """
    Record topic progress, award points and check achievements.

    Args:
        progress_in: Subject, topic, completion, score and time spent

    Returns:
        Stored progress, points earned and newly unlocked achievements
    """
    outcome = ActivityService(db).submit_progress(
        current_user.id,
        progress_in.subject,
        progress_in.topic,
        progress_in.completion_percentage,
        score=progress_in.score,
        time_spent=progress_in.time_spent,
    )
    return {
        "message": "Progress updated successfully",
        "progress": outcome["progress"],
        "pointsEarned": outcome["points_earned"],
        "newAchievements": outcome["new_achievements"],
    }


@router.get("/achievements", response_model=AchievementsResponse)
def achievements(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
) -> Any:
    """Get the full achievement catalog with the student's earned flags."""
    return AchievementEvaluator(db).progress(current_user.id)


@router.get("/leaderboard")
def leaderboard(
    subject: Optional[str] = None,
    limit: int = Query(settings.LEADERBOARD_DEFAULT_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """
    Get the points leaderboard.

    Args:
        subject: Rank by this subject's points instead of total points
        limit: Maximum number of rows

    Raises:
        InvalidSubjectError: Unknown subject
    """
    if subject and not is_valid_subject(subject):
        raise InvalidSubjectError(subject)
    return {"leaderboard": PointsEngine(db).leaderboard(limit=limit, subject=subject)}


@router.get("/points", response_model=PointsSummary)
def points(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
) -> Any:
    """Get the student's points, level, streak and per-subject points."""
    return PointsEngine(db).points_summary(current_user.id)
