"""
Admin endpoints.
"""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.dependencies import get_db
from app.core.gamification import AchievementEvaluator
from app.core.permissions import require_admin
from app.models.achievement import Achievement
from app.models.user import User
from app.schemas.achievement import Achievement as AchievementSchema, AchievementCreate

router = APIRouter()


@router.post("/achievements", status_code=status.HTTP_201_CREATED)
def create_achievement(
    achievement_in: AchievementCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> Any:
    """
    Add a custom achievement unlocked by total points.

    Args:
        achievement_in: Name, description, icon, points threshold and category

    Returns:
        Confirmation message and the created achievement

    Raises:
        HTTPException: If an achievement with the same name exists
    """
    if db.query(Achievement.id).filter(Achievement.name == achievement_in.name).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Achievement with this name already exists",
        )

    achievement = AchievementEvaluator(db).add_custom(
        name=achievement_in.name,
        description=achievement_in.description,
        badge_icon=achievement_in.badge_icon,
        points_required=achievement_in.points_required,
        category=achievement_in.category,
    )
    return {
        "message": "Achievement created successfully",
        "achievement": AchievementSchema.model_validate(achievement),
    }
