"""
Teacher-side class management and analytics.
"""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from app.core.catalog import SUBJECTS
from app.core.gamification.progress_tracker import ProgressTracker
from app.models.classroom import ClassEnrollment, Classroom
from app.models.points import PointsAccount
from app.models.progress import ProgressRecord
from app.models.user import User

logger = logging.getLogger(__name__)

ACTIVE_WINDOW_DAYS = 7

TIME_BUCKETS = [
    (300, "0-5 min"),
    (900, "5-15 min"),
    (1800, "15-30 min"),
    (3600, "30-60 min"),
]
TIME_BUCKET_OVERFLOW = "60+ min"


class ClassAnalytics:
    """Classes, rosters and progress aggregates scoped to one teacher."""

    def __init__(self, db: Session, teacher_id: int):
        self.db = db
        self.teacher_id = teacher_id

    # ---- classes ----

    def classes(self) -> List[Dict[str, Any]]:
        """Teacher's classes with their enrollment counts, newest first."""
        rows = self.db.query(
            Classroom, func.count(ClassEnrollment.student_id).label("student_count")
        ).outerjoin(
            ClassEnrollment, ClassEnrollment.class_id == Classroom.id
        ).filter(Classroom.teacher_id == self.teacher_id).group_by(Classroom.id).order_by(
            Classroom.created_at.desc(), Classroom.id.desc()
        ).all()
        return [self._class_dict(classroom, student_count) for classroom, student_count in rows]

    def create_class(
        self,
        class_name: str,
        grade_level: int,
        subject: str,
        description: Optional[str] = None,
    ) -> Classroom:
        classroom = Classroom(
            teacher_id=self.teacher_id,
            class_name=class_name,
            grade_level=grade_level,
            subject=subject,
            description=description,
        )
        self.db.add(classroom)
        self.db.commit()
        self.db.refresh(classroom)
        logger.info(f"Teacher {self.teacher_id} created class {classroom.id} ({class_name})")
        return classroom

    def get_class(self, class_id: int) -> Optional[Classroom]:
        """The class, or None when it doesn't exist or belongs to another teacher."""
        return self.db.query(Classroom).filter(
            Classroom.id == class_id,
            Classroom.teacher_id == self.teacher_id,
        ).first()

    def class_students(self, class_id: int) -> List[Dict[str, Any]]:
        rows = self.db.query(
            User, PointsAccount.total_points, PointsAccount.current_level, ClassEnrollment.enrolled_at
        ).join(
            ClassEnrollment, ClassEnrollment.student_id == User.id
        ).outerjoin(
            PointsAccount, PointsAccount.user_id == User.id
        ).filter(
            ClassEnrollment.class_id == class_id,
            User.role == "student",
            User.is_active.is_(True),
        ).order_by(User.full_name).all()

        students = []
        for user, total_points, current_level, enrolled_at in rows:
            entry = self._student_dict(user, total_points, current_level)
            entry["enrolled_at"] = enrolled_at
            students.append(entry)
        return students

    def enroll(self, class_id: int, student_id: int) -> ClassEnrollment:
        """
        Enroll a student in one of the teacher's classes.

        Re-enrolling returns the existing enrollment.
        """
        existing = self.db.query(ClassEnrollment).filter(
            ClassEnrollment.class_id == class_id,
            ClassEnrollment.student_id == student_id,
        ).first()
        if existing:
            return existing

        enrollment = ClassEnrollment(class_id=class_id, student_id=student_id)
        self.db.add(enrollment)
        self.db.commit()
        self.db.refresh(enrollment)
        logger.info(f"Enrolled student {student_id} in class {class_id}")
        return enrollment

    # ---- students ----

    def students(self) -> List[Dict[str, Any]]:
        """Distinct active students enrolled in any of the teacher's classes."""
        student_ids = self._student_ids_query().subquery()
        rows = self.db.query(
            User, PointsAccount.total_points, PointsAccount.current_level
        ).outerjoin(
            PointsAccount, PointsAccount.user_id == User.id
        ).filter(User.id.in_(student_ids.select())).order_by(User.full_name).all()
        return [self._student_dict(user, total_points, level) for user, total_points, level in rows]

    def has_student(self, student_id: int) -> bool:
        return self._student_ids_query().filter(User.id == student_id).first() is not None

    def class_progress(self) -> List[Dict[str, Any]]:
        """Per student and subject aggregates across the teacher's classes."""
        student_ids = self._student_ids_query().subquery()
        rows = self.db.query(
            User.id.label("student_id"),
            User.full_name,
            ProgressRecord.subject,
            func.count(ProgressRecord.id).label("total_topics"),
            func.avg(ProgressRecord.completion_percentage).label("avg_completion"),
            func.avg(ProgressRecord.score).label("avg_score"),
            func.sum(ProgressRecord.time_spent).label("total_time_spent"),
            func.sum(case((ProgressRecord.completion_percentage >= 100, 1), else_=0)).label("completed_topics"),
        ).outerjoin(
            ProgressRecord, ProgressRecord.student_id == User.id
        ).filter(User.id.in_(student_ids.select())).group_by(
            User.id, User.full_name, ProgressRecord.subject
        ).order_by(User.full_name, ProgressRecord.subject).all()

        return [
            {
                "student_id": row.student_id,
                "full_name": row.full_name,
                "subject": row.subject,
                "total_topics": int(row.total_topics or 0),
                "avg_completion": float(row.avg_completion) if row.avg_completion is not None else None,
                "avg_score": float(row.avg_score) if row.avg_score is not None else None,
                "total_time_spent": int(row.total_time_spent or 0),
                "completed_topics": int(row.completed_topics or 0),
            }
            for row in rows
        ]

    # ---- analytics ----

    def dashboard(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        classes = self.classes()
        students = self.students()
        progress = self.class_progress()

        active_since = now - timedelta(days=ACTIVE_WINDOW_DAYS)
        active_students = sum(
            1 for student in students
            if student["last_login"] and _as_utc(student["last_login"]) > active_since
        )

        completion_by_subject: Dict[str, Dict[str, Any]] = {}
        for row in progress:
            if row["subject"] is None:
                continue
            bucket = completion_by_subject.setdefault(row["subject"], {"total": 0.0, "count": 0, "avg": 0})
            if row["avg_completion"]:
                bucket["total"] += row["avg_completion"]
                bucket["count"] += 1
        for bucket in completion_by_subject.values():
            bucket["avg"] = round(bucket["total"] / bucket["count"]) if bucket["count"] else 0

        return {
            "summary": {
                "totalStudents": len(students),
                "activeStudents": active_students,
                "totalClasses": len(classes),
                "avgCompletionBySubject": completion_by_subject,
            },
            "classes": classes,
            "recentActivity": progress[:10],
        }

    def student_analytics(self, subject: Optional[str] = None, timeframe: int = 30) -> List[Dict[str, Any]]:
        analytics = []
        for student in self.students():
            query = self.db.query(ProgressRecord).filter(ProgressRecord.student_id == student["id"])
            if subject:
                query = query.filter(ProgressRecord.subject == subject)
            records = query.all()

            recent_count = min(
                self.db.query(func.count(ProgressRecord.id)).filter(
                    ProgressRecord.student_id == student["id"]
                ).scalar() or 0,
                timeframe,
            )
            analytics.append({
                "student": self._student_ref(student),
                "progress": self._overall_progress(student["id"]),
                "recentActivity": recent_count,
                "totalTimeSpent": sum(r.time_spent or 0 for r in records),
                "avgScore": round(sum(r.score or 0 for r in records) / len(records)) if records else 0,
                "completedTopics": sum(1 for r in records if (r.completion_percentage or 0) >= 100),
                "totalTopics": len(records),
            })
        return analytics

    def subject_analytics(self) -> List[Dict[str, Any]]:
        progress = self.class_progress()
        analytics = []
        for subject in SUBJECTS:
            rows = [row for row in progress if row["subject"] == subject]
            if not rows:
                analytics.append({
                    "subject": subject,
                    "studentCount": 0,
                    "avgCompletion": 0,
                    "avgScore": 0,
                    "totalTimeSpent": 0,
                    "completionRate": 0,
                })
                continue

            total_topics = sum(row["total_topics"] for row in rows)
            completed = sum(row["completed_topics"] for row in rows)
            analytics.append({
                "subject": subject,
                "studentCount": len(rows),
                "avgCompletion": round(sum(row["avg_completion"] or 0 for row in rows) / len(rows)),
                "avgScore": round(sum(row["avg_score"] or 0 for row in rows) / len(rows)),
                "totalTimeSpent": sum(row["total_time_spent"] for row in rows),
                "completionRate": round(completed / total_topics * 100) if total_topics else 0,
            })
        return analytics

    def engagement(self, days: int = 30, today: Optional[date] = None) -> Dict[str, Any]:
        """Daily active student counts for the last `days` days and a time-spent histogram."""
        today = today or date.today()
        student_ids = [student["id"] for student in self.students()]
        start = today - timedelta(days=days - 1)

        active_by_day: Dict[str, int] = {}
        if student_ids:
            day = func.date(ProgressRecord.last_accessed)
            rows = self.db.query(
                day.label("day"), func.count(func.distinct(ProgressRecord.student_id))
            ).filter(
                ProgressRecord.student_id.in_(student_ids),
                day >= start.isoformat(),
            ).group_by(day).all()
            active_by_day = {str(row[0]): row[1] for row in rows}

        daily_activity = []
        for offset in range(days):
            current = (start + timedelta(days=offset)).isoformat()
            daily_activity.append({
                "date": current,
                "activeStudents": active_by_day.get(current, 0),
                "totalStudents": len(student_ids),
            })

        return {
            "dailyActivity": daily_activity,
            "timeDistribution": self.time_distribution(student_ids),
            "totalStudents": len(student_ids),
        }

    def time_distribution(self, student_ids: List[int]) -> List[Dict[str, Any]]:
        if not student_ids:
            return []
        time_range = case(
            *[(ProgressRecord.time_spent < limit, label) for limit, label in TIME_BUCKETS],
            else_=TIME_BUCKET_OVERFLOW,
        ).label("time_range")
        rows = self.db.query(time_range, func.count(ProgressRecord.id)).filter(
            ProgressRecord.student_id.in_(student_ids)
        ).group_by(time_range).order_by(func.min(ProgressRecord.time_spent)).all()
        return [{"time_range": label, "count": count} for label, count in rows]

    def student_progress(self, student_id: int) -> Optional[Dict[str, Any]]:
        """Detailed progress for one of the teacher's students, None if not theirs."""
        if not self.has_student(student_id):
            return None
        student = self.db.query(User).filter(User.id == student_id).first()
        recent = self.db.query(ProgressRecord).filter(
            ProgressRecord.student_id == student_id
        ).order_by(ProgressRecord.last_accessed.desc(), ProgressRecord.id.desc()).limit(20).all()
        return {
            "student": self._student_ref(self._student_dict(student, None, None)),
            "progress": self._overall_progress(student_id),
            "recentActivity": [
                {
                    "subject": record.subject,
                    "topic": record.topic,
                    "completion_percentage": record.completion_percentage,
                    "score": record.score,
                    "last_accessed": record.last_accessed,
                }
                for record in recent
            ],
        }

    # ---- helpers ----

    def _student_ids_query(self):
        return self.db.query(User.id).join(
            ClassEnrollment, ClassEnrollment.student_id == User.id
        ).join(
            Classroom, Classroom.id == ClassEnrollment.class_id
        ).filter(
            Classroom.teacher_id == self.teacher_id,
            User.role == "student",
            User.is_active.is_(True),
        ).distinct()

    def _overall_progress(self, student_id: int) -> List[Dict[str, Any]]:
        return [summary.model_dump() for summary in ProgressTracker(self.db).overall_summary(student_id)]

    @staticmethod
    def _class_dict(classroom: Classroom, student_count: int = 0) -> Dict[str, Any]:
        return {
            "id": classroom.id,
            "teacher_id": classroom.teacher_id,
            "class_name": classroom.class_name,
            "grade_level": classroom.grade_level,
            "subject": classroom.subject,
            "description": classroom.description,
            "created_at": classroom.created_at,
            "student_count": int(student_count or 0),
        }

    @staticmethod
    def _student_dict(user: User, total_points: Optional[int], current_level: Optional[int]) -> Dict[str, Any]:
        return {
            "id": user.id,
            "username": user.username,
            "full_name": user.full_name,
            "email": user.email,
            "grade_level": user.grade_level,
            "school_name": user.school_name,
            "avatar_url": user.avatar_url,
            "last_login": user.last_login,
            "total_points": total_points or 0,
            "current_level": current_level or 1,
        }

    @staticmethod
    def _student_ref(student: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": student["id"],
            "name": student["full_name"],
            "username": student["username"],
            "grade_level": student["grade_level"],
            "last_login": student["last_login"],
        }


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
