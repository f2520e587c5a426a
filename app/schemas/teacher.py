"""
Schemas for teacher class management.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

Subject = Literal["physics", "chemistry", "math", "biology"]


class ClassCreate(BaseModel):
    class_name: str = Field(..., min_length=1, max_length=100)
    grade_level: int = Field(..., ge=6, le=12)
    subject: Subject
    description: Optional[str] = Field(None, max_length=500)


class ClassOut(BaseModel):
    id: int
    teacher_id: int
    class_name: str
    grade_level: Optional[int] = None
    subject: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    student_count: int = 0

    class Config:
        """Pydantic config."""

        from_attributes = True


class EnrollRequest(BaseModel):
    student_id: int


class EnrollmentOut(BaseModel):
    id: int
    class_id: int
    student_id: int
    enrolled_at: Optional[datetime] = None

    class Config:
        """Pydantic config."""

        from_attributes = True
