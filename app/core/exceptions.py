"""
Custom exceptions for the REST API.

Everything raised from a route handler derives from HTTPException so that
FastAPI renders it with the right status code.
"""
from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class LearningAPIException(HTTPException):
    """Base exception for the learning platform API."""

    def __init__(
        self,
        status_code: int,
        detail: Any,
        headers: Optional[Dict[str, str]] = None,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code
        self.extra = extra or {}


class InvalidSubjectError(LearningAPIException):
    """Subject outside the fixed subject set."""

    def __init__(self, subject: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid subject",
            error_code="INVALID_SUBJECT",
            extra={"subject": subject}
        )


class NotFoundError(LearningAPIException):
    """Unknown class, student, game or achievement."""

    def __init__(self, resource: str, identifier: Any = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found",
            error_code="NOT_FOUND",
            extra={"resource": resource, "id": identifier}
        )


class AuthenticationError(LearningAPIException):
    """Missing, expired or invalid credentials."""

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="AUTHENTICATION_FAILED",
            headers={"WWW-Authenticate": "Bearer"}
        )


class AuthorizationError(LearningAPIException):
    """Authenticated, but the role does not allow the action."""

    def __init__(self, detail: str = "Insufficient permissions."):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code="AUTHORIZATION_FAILED"
        )
