"""
Database initialization and seeding.
"""
import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.gamification.rules import DEFAULT_ACHIEVEMENTS
from app.core.security import get_password_hash
from app.models.achievement import Achievement
from app.models.user import User

logger = logging.getLogger(__name__)


def seed_achievements(db: Session) -> int:
    """Insert catalog achievements missing by name. Returns how many were added."""
    existing = {name for (name,) in db.query(Achievement.name).all()}
    added = 0
    for entry in DEFAULT_ACHIEVEMENTS:
        if entry["name"] in existing:
            continue
        db.add(Achievement(
            name=entry["name"],
            description=entry["description"],
            badge_icon=entry["badge_icon"],
            points_required=entry["points_required"],
            category=entry["category"],
            rule_kind=entry["rule_kind"].value,
            rule_threshold=entry["rule_threshold"],
            rule_subject=entry.get("rule_subject"),
        ))
        added += 1
    if added:
        db.commit()
        logger.info(f"Seeded {added} achievements")
    return added


def init_db(db: Session) -> dict:
    """
    Initialize database with default data.

    Args:
        db: Database session

    Returns:
        Counts of seeded achievements and whether the admin user was created
    """
    added = seed_achievements(db)

    # Check if admin user exists
    admin_created = False
    admin = db.query(User).filter(User.email == settings.SEED_ADMIN_EMAIL).first()
    if not admin:
        admin = User(
            email=settings.SEED_ADMIN_EMAIL,
            username="admin",
            full_name="System Administrator",
            hashed_password=get_password_hash(settings.SEED_ADMIN_PASSWORD),
            role="admin",
            is_active=True,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)
        admin_created = True
        logger.info("Admin user created successfully")

    return {"achievements": added, "admin_created": admin_created}
