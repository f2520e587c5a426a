"""
Achievement catalog and the grants earned by users.
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class Achievement(Base):
    """Catalog entry. Entries without a rule_kind use the points threshold."""

    __tablename__ = "achievements"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)
    badge_icon = Column(String, nullable=True)
    points_required = Column(Integer, default=0)
    category = Column(String, nullable=True)
    rule_kind = Column(String, nullable=True)  # see app.core.gamification.rules.RuleKind
    rule_threshold = Column(Integer, nullable=True)
    rule_subject = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    grants = relationship("AchievementGrant", back_populates="achievement", cascade="all, delete-orphan")


class AchievementGrant(Base):
    """A user unlocked an achievement. At most one per pair."""

    __tablename__ = "user_achievements"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    achievement_id = Column(Integer, ForeignKey("achievements.id", ondelete="CASCADE"), nullable=False)
    earned_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="achievement_grants")
    achievement = relationship("Achievement", back_populates="grants")

    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
    )
