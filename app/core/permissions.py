"""
Role-based access control.

Routes declare the roles they accept through these dependencies; a user
whose role is not listed gets 403 "Insufficient permissions.".

Example usage:
    ```python
    @router.get("/dashboard")
    def dashboard(current_user: User = Depends(require_student)):
        ...
    ```
"""
from typing import Callable

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.analytics import ClassAnalytics
from app.core.dependencies import get_current_active_user
from app.core.exceptions import AuthorizationError, NotFoundError
from app.models.classroom import Classroom
from app.models.user import User

STUDENT = "student"
TEACHER = "teacher"
ADMIN = "admin"


def require_role(*roles: str) -> Callable[..., User]:
    """
    Build a dependency that only lets the given roles through.

    Args:
        roles: Accepted role names

    Returns:
        FastAPI dependency returning the current user
    """
    def dependency(current_user: User = Depends(get_current_active_user)) -> User:
        if current_user.role not in roles:
            raise AuthorizationError()
        return current_user

    return dependency


require_student = require_role(STUDENT)
require_teacher = require_role(TEACHER)
require_admin = require_role(ADMIN)


def require_class_ownership(class_id: int, teacher: User, db: Session) -> Classroom:
    """
    Verify the class belongs to the teacher.

    Raises:
        NotFoundError: Class missing or owned by another teacher
    """
    classroom = ClassAnalytics(db, teacher.id).get_class(class_id)
    if classroom is None:
        raise NotFoundError("Class", class_id)
    return classroom
