from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.core.config import DEFAULT_PENALTY_RATE_PERCENT, DEFAULT_TASK_WEIGHT
from app.core.enums import TaskStatus, Urgency


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    subject_id: str
    due_at: datetime
    max_score: float = Field(gt=0)
    weight: int = Field(default=DEFAULT_TASK_WEIGHT, gt=0)
    penalty_rate_percent: float = Field(default=DEFAULT_PENALTY_RATE_PERCENT, ge=0)
    definition: list[str] = Field(default_factory=list)
    student_id: Optional[str] = None

    @field_validator("due_at")
    @classmethod
    def due_at_in_utc(cls, v: datetime) -> datetime:
        # stored without offset (SQLite), so always keep UTC on disk
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class TaskUpdate(BaseModel):
    """Only the fields faculty may change after publishing."""

    description: Optional[str] = None
    weight: Optional[int] = Field(default=None, gt=0)
    penalty_rate_percent: Optional[float] = Field(default=None, ge=0)
    definition: Optional[list[str]] = None


class TaskRead(BaseModel):
    id: str
    title: str
    description: Optional[str]
    subject_id: str
    student_id: Optional[str]
    status: TaskStatus
    due_at: datetime
    weight: int
    max_score: float
    penalty_rate_percent: float
    definition: list[str]
    created_at: datetime

    class Config:
        from_attributes = True


class TaskAssign(BaseModel):
    student_id: str


class TaskSubmit(BaseModel):
    content: Optional[str] = None


class SubmissionRead(BaseModel):
    id: str
    task_id: str
    student_id: str
    content: Optional[str]
    submitted_at: datetime

    class Config:
        from_attributes = True


class TaskProjection(BaseModel):
    task_id: str
    at: datetime
    max_score: float
    penalty_rate_percent: float
    days_remaining: int
    penalty_fraction: float
    potential_score: float
    urgency: Urgency
