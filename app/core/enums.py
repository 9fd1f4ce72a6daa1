"""Shared enumerations: roles, task and grade lifecycles, urgency buckets."""

from enum import Enum


class _ValuesMixin:
    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class UserRole(_ValuesMixin, str, Enum):
    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"


class TaskStatus(_ValuesMixin, str, Enum):
    """Forward-only task lifecycle. Order of declaration is the order of progress."""

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    SUBMITTED = "submitted"
    GRADED = "graded"


class GradeStatus(_ValuesMixin, str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    APPROVED = "approved"


class Strictness(_ValuesMixin, str, Enum):
    LOOSE = "loose"
    MEDIUM = "medium"
    HARD = "hard"


class Urgency(_ValuesMixin, str, Enum):
    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
