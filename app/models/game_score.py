"""
Models for tracking game play attempts.
"""
from sqlalchemy import Column, Integer, String, JSON, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import Base


class GameScoreEntry(Base):
    """One row per play attempt. Append-only."""

    __tablename__ = "game_scores"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    game_id = Column(String, nullable=False, index=True)
    subject = Column(String, nullable=False)
    score = Column(Integer, nullable=False)
    level_completed = Column(Integer, default=1)
    time_taken = Column(Integer, nullable=True)  # Time in seconds
    points_earned = Column(Integer, default=0)
    game_data = Column(JSON, nullable=True)
    played_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="game_scores")
