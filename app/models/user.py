"""
User model for authentication and authorization.
"""
from sqlalchemy import Boolean, Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class User(Base):
    """User model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, default="student")  # student, teacher, admin
    grade_level = Column(Integer, nullable=True)  # students only, 6-12
    school_name = Column(String, nullable=True)
    preferred_language = Column(String, default="english")  # english, hindi, regional
    avatar_url = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    progress_records = relationship(
        "ProgressRecord", back_populates="student", cascade="all, delete-orphan"
    )
    points_account = relationship(
        "PointsAccount", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    achievement_grants = relationship(
        "AchievementGrant", back_populates="user", cascade="all, delete-orphan"
    )
    game_scores = relationship("GameScoreEntry", back_populates="user", cascade="all, delete-orphan")
    classes_taught = relationship("Classroom", back_populates="teacher", cascade="all, delete-orphan")

    @property
    def is_student(self) -> bool:
        return self.role == "student"
