"""
Progress tracker for (student, subject, topic) records.
Stores the best completion and score seen across attempts.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.catalog import is_valid_subject
from app.core.gamification.errors import GamificationInputError, UnknownSubjectError
from app.core.gamification.schemas import ProgressResult, SubjectSummary
from app.models.progress import ProgressRecord

logger = logging.getLogger(__name__)

MAX_TOPIC_LENGTH = 100


class ProgressTracker:
    """
    Upserts topic progress for a student.

    Attempts always count, even when the incoming completion or score is
    lower than the stored best.
    """

    def __init__(self, db: Session):
        self.db = db

    def record_progress(
        self,
        student_id: int,
        subject: str,
        topic: str,
        completion_percentage: float,
        score: int = 0,
        time_spent: int = 0,
    ) -> ProgressResult:
        """
        Create or update the progress record for a topic.

        Args:
            student_id: Student ID
            subject: One of the fixed subjects
            topic: Topic name, 1-100 characters
            completion_percentage: 0-100
            score: 0-100
            time_spent: Seconds spent in this attempt

        Returns:
            ProgressResult with created/updated flag and stored values
        """
        self._validate(subject, topic, completion_percentage, score, time_spent)

        record = self.db.query(ProgressRecord).filter(
            ProgressRecord.student_id == student_id,
            ProgressRecord.subject == subject,
            ProgressRecord.topic == topic,
        ).with_for_update().first()

        if record is None:
            record = ProgressRecord(
                student_id=student_id,
                subject=subject,
                topic=topic,
                completion_percentage=completion_percentage,
                score=score,
                time_spent=time_spent,
                attempts=1,
            )
            self.db.add(record)
            try:
                self.db.commit()
            except IntegrityError:
                # Another request created the record first; count this one as an update
                self.db.rollback()
                return self.record_progress(student_id, subject, topic, completion_percentage, score, time_spent)
            self.db.refresh(record)
            logger.info(f"Created progress for student {student_id}: {subject}/{topic}")
            return self._result(record, created=True)

        record.attempts = record.attempts + 1
        record.time_spent = (record.time_spent or 0) + time_spent
        record.score = max(record.score or 0, score)
        record.completion_percentage = max(record.completion_percentage or 0.0, completion_percentage)
        record.last_accessed = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(record)
        return self._result(record, updated=True)

    def list_records(self, student_id: int, subject: Optional[str] = None) -> List[ProgressRecord]:
        query = self.db.query(ProgressRecord).filter(ProgressRecord.student_id == student_id)
        if subject:
            query = query.filter(ProgressRecord.subject == subject)
        return query.order_by(ProgressRecord.last_accessed.desc(), ProgressRecord.id.desc()).all()

    def topic_progress(self, student_id: int, subject: str, topic: str) -> Optional[ProgressRecord]:
        return self.db.query(ProgressRecord).filter(
            ProgressRecord.student_id == student_id,
            ProgressRecord.subject == subject,
            ProgressRecord.topic == topic,
        ).first()

    def recent_activity(self, student_id: int, limit: int = 10) -> List[ProgressRecord]:
        return self.db.query(ProgressRecord).filter(
            ProgressRecord.student_id == student_id
        ).order_by(ProgressRecord.last_accessed.desc(), ProgressRecord.id.desc()).limit(limit).all()

    def subject_summary(self, student_id: int, subject: str) -> SubjectSummary:
        """Aggregate one subject. Subjects without records report zeros."""
        row = self._summary_query().filter(
            ProgressRecord.student_id == student_id,
            ProgressRecord.subject == subject,
        ).group_by(ProgressRecord.subject).first()
        if row is None:
            return SubjectSummary(subject=subject)
        return self._summary(row)

    def overall_summary(self, student_id: int) -> List[SubjectSummary]:
        """Per-subject aggregates for every subject the student has touched."""
        rows = self._summary_query().filter(
            ProgressRecord.student_id == student_id
        ).group_by(ProgressRecord.subject).order_by(ProgressRecord.subject).all()
        return [self._summary(row) for row in rows]

    def _summary_query(self):
        return self.db.query(
            ProgressRecord.subject.label("subject"),
            func.count(ProgressRecord.id).label("total_topics"),
            func.avg(ProgressRecord.completion_percentage).label("avg_completion"),
            func.avg(ProgressRecord.score).label("avg_score"),
            func.sum(ProgressRecord.time_spent).label("total_time_spent"),
            func.sum(case((ProgressRecord.completion_percentage >= 100, 1), else_=0)).label("completed_topics"),
        )

    @staticmethod
    def _summary(row) -> SubjectSummary:
        return SubjectSummary(
            subject=row.subject,
            total_topics=int(row.total_topics or 0),
            avg_completion=float(row.avg_completion or 0),
            avg_score=float(row.avg_score or 0),
            total_time_spent=int(row.total_time_spent or 0),
            completed_topics=int(row.completed_topics or 0),
        )

    @staticmethod
    def _result(record: ProgressRecord, created: bool = False, updated: bool = False) -> ProgressResult:
        return ProgressResult(
            id=record.id,
            created=created,
            updated=updated,
            completion_percentage=record.completion_percentage,
            score=record.score,
            attempts=record.attempts,
            time_spent=record.time_spent,
        )

    @staticmethod
    def _validate(subject, topic, completion_percentage, score, time_spent) -> None:
        if not is_valid_subject(subject):
            raise UnknownSubjectError(subject)
        if not topic or len(topic) > MAX_TOPIC_LENGTH:
            raise GamificationInputError("topic", f"Topic must be 1-{MAX_TOPIC_LENGTH} characters", topic)
        if not 0 <= completion_percentage <= 100:
            raise GamificationInputError("completion_percentage", "Must be between 0 and 100", completion_percentage)
        if not 0 <= score <= 100:
            raise GamificationInputError("score", "Must be between 0 and 100", score)
        if time_spent < 0:
            raise GamificationInputError("time_spent", "Must be non-negative", time_spent)


