"""
Teacher endpoints: classes, rosters and analytics.
"""
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.analytics import ClassAnalytics
from app.core.dependencies import get_db
from app.core.exceptions import InvalidSubjectError, NotFoundError
from app.core.catalog import is_valid_subject
from app.core.permissions import require_class_ownership, require_teacher
from app.models.user import User
from app.schemas.teacher import ClassCreate, ClassOut, EnrollmentOut, EnrollRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/dashboard")
def dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
) -> Any:
    """
    Get the teacher's dashboard.

    Returns:
        Student and class counts, average completion per subject, classes
        and the first 10 progress aggregates
    """
    return ClassAnalytics(db, current_user.id).dashboard()


@router.get("/classes")
def list_classes(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
) -> Any:
    """Get the teacher's classes with enrollment counts."""
    return {"classes": ClassAnalytics(db, current_user.id).classes()}


@router.post("/classes", status_code=status.HTTP_201_CREATED)
def create_class(
    class_in: ClassCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
) -> Any:
    """
    Create a class.

    Args:
        class_in: Name, grade level, subject and description

    Returns:
        Confirmation message and the created class
    """
    classroom = ClassAnalytics(db, current_user.id).create_class(
        class_in.class_name,
        class_in.grade_level,
        class_in.subject,
        class_in.description,
    )
    return {
        "message": "Class created successfully",
        "class": ClassOut.model_validate(classroom),
    }


@router.get("/classes/{class_id}/students")
def class_students(
    class_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
) -> Any:
    """
    Get the active students enrolled in one of the teacher's classes.

    Raises:
        NotFoundError: Class missing or owned by another teacher
    """
    require_class_ownership(class_id, current_user, db)
    return {"students": ClassAnalytics(db, current_user.id).class_students(class_id)}


@router.post("/classes/{class_id}/students", status_code=status.HTTP_201_CREATED)
def enroll_student(
    class_id: int,
    enroll_in: EnrollRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
) -> Any:
    """
    Enroll a student in one of the teacher's classes.

    Raises:
        NotFoundError: Class not the teacher's, or no active student with that id
    """
    require_class_ownership(class_id, current_user, db)

    student = db.query(User).filter(
        User.id == enroll_in.student_id,
        User.role == "student",
        User.is_active.is_(True),
    ).first()
    if student is None:
        raise NotFoundError("Student", enroll_in.student_id)

    enrollment = ClassAnalytics(db, current_user.id).enroll(class_id, student.id)
    return {
        "message": "Student enrolled successfully",
        "enrollment": EnrollmentOut.model_validate(enrollment),
    }


@router.get("/analytics/students")
def student_analytics(
    subject: Optional[str] = None,
    timeframe: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
) -> Any:
    """
    Get per-student analytics across the teacher's classes.

    Args:
        subject: Restrict topic statistics to one subject
        timeframe: Cap on the recent activity count
    """
    if subject and not is_valid_subject(subject):
        raise InvalidSubjectError(subject)
    return {"analytics": ClassAnalytics(db, current_user.id).student_analytics(subject, timeframe)}


@router.get("/analytics/subjects")
def subject_analytics(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
) -> Any:
    """Get per-subject averages and completion rates across the teacher's students."""
    return {"analytics": ClassAnalytics(db, current_user.id).subject_analytics()}


@router.get("/analytics/engagement")
def engagement(
    days: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
) -> Any:
    """Get daily active students and the time-spent distribution."""
    return ClassAnalytics(db, current_user.id).engagement(days)


@router.get("/students/{student_id}/progress")
def student_progress(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
) -> Any:
    """
    Get detailed progress for one of the teacher's students.

    Raises:
        NotFoundError: Student not enrolled in any of the teacher's classes
    """
    detail = ClassAnalytics(db, current_user.id).student_progress(student_id)
    if detail is None:
        raise NotFoundError("Student", student_id)
    return detail
