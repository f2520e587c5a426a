"""
Per-topic learning progress.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Float, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class ProgressRecord(Base):
    """Progress of one student on one (subject, topic)."""

    __tablename__ = "student_progress"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    subject = Column(String, nullable=False)
    topic = Column(String, nullable=False)
    completion_percentage = Column(Float, default=0.0)  # best seen, 0-100
    score = Column(Integer, default=0)  # best seen, 0-100
    time_spent = Column(Integer, default=0)  # cumulative seconds
    attempts = Column(Integer, default=0)
    last_accessed = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    student = relationship("User", back_populates="progress_records")

    __table_args__ = (
        UniqueConstraint("student_id", "subject", "topic", name="uq_student_subject_topic"),
    )
