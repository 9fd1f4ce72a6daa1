from fastapi import Depends, HTTPException, status

from app.core.current_user import get_current_user
from app.core.enums import UserRole
from app.models.user import User


def require_faculty(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role not in (UserRole.FACULTY.value, UserRole.ADMIN.value):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Faculty role required",
        )
    return current_user


def require_student(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.STUDENT.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Student role required",
        )
    return current_user
