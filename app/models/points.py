"""
Points, level and streak bookkeeping for students.
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.catalog import SUBJECTS
from app.db.base import Base


class PointsAccount(Base):
    """One row per student."""

    __tablename__ = "user_points"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    total_points = Column(Integer, default=0, nullable=False)
    current_level = Column(Integer, default=1, nullable=False)  # total_points // 100 + 1
    daily_streak = Column(Integer, default=0, nullable=False)
    last_activity_date = Column(Date, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="points_account")
    subject_rows = relationship(
        "SubjectPoints",
        primaryjoin="PointsAccount.user_id == foreign(SubjectPoints.user_id)",
        viewonly=True,
    )

    @property
    def subject_points(self):
        """Per-subject breakdown over the fixed subject set."""
        breakdown = {subject: 0 for subject in SUBJECTS}
        for row in self.subject_rows:
            breakdown[row.subject] = row.points
        return breakdown


class SubjectPoints(Base):
    """Points earned by a student in one subject."""

    __tablename__ = "subject_points"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    subject = Column(String, nullable=False)
    points = Column(Integer, default=0, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "subject", name="uq_subject_points_user_subject"),
    )
