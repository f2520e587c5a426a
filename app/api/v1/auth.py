"""
Authentication endpoints for user registration, login and profile.
"""
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.dependencies import get_current_active_user, get_db
from app.core.gamification import PointsEngine
from app.core.security import create_user_token, get_password_hash, verify_password
from app.models.user import User
from app.schemas.common import Message
from app.schemas.user import AuthResponse, User as UserSchema, UserCreate, UserLogin, UserProfile, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user_in: UserCreate, db: Session = Depends(get_db)) -> Any:
    """
    Register a new student or teacher.

    Args:
        user_in: User registration data
        db: Database session

    Returns:
        Message, created user and access token

    Raises:
        HTTPException: If email or username already exists
    """
    # Check if user exists
    user = db.query(User).filter(User.email == user_in.email).first()
    if user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists",
        )

    user = db.query(User).filter(User.username == user_in.username).first()
    if user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already taken",
        )

    # Create new user
    user = User(
        email=user_in.email,
        username=user_in.username,
        full_name=user_in.full_name,
        hashed_password=get_password_hash(user_in.password),
        role=user_in.role,
        grade_level=user_in.grade_level if user_in.role == "student" else None,
        school_name=user_in.school_name,
        preferred_language=user_in.preferred_language,
        is_active=True,
        last_login=datetime.now(timezone.utc),
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    if user.is_student:
        PointsEngine(db).get_account(user.id)

    logger.info(f"Registered {user.role} {user.username} (id={user.id})")
    return {
        "message": "User registered successfully",
        "user": user,
        "token": create_user_token(user),
    }


@router.post("/login", response_model=AuthResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)) -> Any:
    """
    Login user and return JWT token.

    Args:
        credentials: Email and password
        db: Database session

    Returns:
        Message, user and access token

    Raises:
        HTTPException: If credentials are invalid
    """
    user = db.query(User).filter(User.email == credentials.email).first()

    if not user or not verify_password(credentials.password, user.hashed_password):  # type: ignore
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:  # type: ignore
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )

    user.last_login = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)

    return {
        "message": "Login successful",
        "user": user,
        "token": create_user_token(user),
    }


@router.get("/profile")
def read_profile(current_user: User = Depends(get_current_active_user)) -> Any:
    """
    Get current authenticated user's profile.

    Args:
        current_user: Current authenticated user

    Returns:
        Current user data
    """
    return {"user": UserProfile.model_validate(current_user)}


@router.put("/profile", response_model=Message)
def update_profile(
    profile_in: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """
    Update profile fields. Fields left out are unchanged.

    Args:
        profile_in: Profile fields to change
        db: Database session
        current_user: Current authenticated user

    Returns:
        Confirmation message
    """
    updates = profile_in.model_dump(exclude_unset=True, exclude_none=True)
    if "avatar_url" in updates:
        updates["avatar_url"] = str(updates["avatar_url"])
    for field, value in updates.items():
        setattr(current_user, field, value)
    db.commit()

    return {"message": "Profile updated successfully"}


@router.get("/validate")
def validate_token(current_user: User = Depends(get_current_active_user)) -> Any:
    """
    Confirm the bearer token is valid.

    Args:
        current_user: Current authenticated user

    Returns:
        Validity flag and identity claims
    """
    return {
        "valid": True,
        "user": UserSchema.model_validate(current_user).model_dump(
            include={"id", "username", "email", "role"}
        ),
    }
