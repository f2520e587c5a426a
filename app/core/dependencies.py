"""
Dependency injection for FastAPI endpoints.
"""
from typing import Optional, cast

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.security import decode_token
from app.db.base import get_db
from app.models.user import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_PREFIX}/auth/login", auto_error=False)

__all__ = ["get_db", "get_current_user", "get_current_active_user", "oauth2_scheme"]


def get_current_user(
    db: Session = Depends(get_db), token: Optional[str] = Depends(oauth2_scheme)
) -> User:
    """
    Get current authenticated user from JWT token.

    Args:
        db: Database session
        token: JWT token

    Returns:
        Current user

    Raises:
        AuthenticationError: If the token is missing, invalid, expired or the user not found
    """
    if not token:
        raise AuthenticationError("Access denied. No token provided.")

    try:
        payload = decode_token(token)
    except ExpiredSignatureError:
        raise AuthenticationError("Token expired.")
    except JWTError:
        raise AuthenticationError("Invalid token.")

    user_id: Optional[str] = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        raise AuthenticationError()

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise AuthenticationError("Invalid token. User not found.")

    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """
    Get current active user.

    Args:
        current_user: Current authenticated user

    Returns:
        Current active user

    Raises:
        AuthenticationError: If user is inactive
    """
    if not cast(bool, current_user.is_active):
        raise AuthenticationError("Inactive user")
    return current_user
