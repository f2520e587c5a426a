"""
Pydantic schemas for User model.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, HttpUrl

Language = Literal["english", "hindi", "regional"]


class UserBase(BaseModel):
    """Base user schema."""

    email: EmailStr
    username: str = Field(..., min_length=3, max_length=30, pattern=r"^[A-Za-z0-9_]+$",
                          description="Letters, numbers and underscores only")
    full_name: str = Field(..., min_length=2, max_length=100)


class UserCreate(UserBase):
    """Schema for registration. Only students and teachers can self-register."""

    password: str = Field(..., min_length=6)
    role: Literal["student", "teacher"]
    grade_level: Optional[int] = Field(None, ge=6, le=12)
    school_name: Optional[str] = Field(None, max_length=200)
    preferred_language: Language = "english"


class UserLogin(BaseModel):
    """Schema for login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    """Schema for profile update."""

    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    school_name: Optional[str] = Field(None, max_length=200)
    preferred_language: Optional[Language] = None
    avatar_url: Optional[HttpUrl] = None


class User(BaseModel):
    """Schema for user response."""

    id: int
    username: str
    email: EmailStr
    role: str
    full_name: str
    grade_level: Optional[int] = None
    school_name: Optional[str] = None
    preferred_language: Optional[str] = None
    avatar_url: Optional[str] = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class UserProfile(User):
    """Schema for the profile endpoint."""

    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None


class AuthResponse(BaseModel):
    """Schema for register and login responses."""

    message: str
    user: User
    token: str
