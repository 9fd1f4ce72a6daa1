from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.core.enums import GradeStatus, Strictness


class GradeCreate(BaseModel):
    task_id: str
    student_id: Optional[str] = None
    # left out -> the task's projected score at submission time
    auto_score: Optional[float] = Field(default=None, ge=0)
    feedback: Optional[str] = None
    strictness: Strictness = Strictness.MEDIUM


class GradeReview(BaseModel):
    feedback: Optional[str] = None
    strictness: Optional[Strictness] = None


class GradeOverrideRequest(BaseModel):
    task_id: str
    student_id: str
    final_score: float = Field(ge=0)
    reason: str = Field(min_length=1)


class GradeRead(BaseModel):
    id: str
    task_id: str
    student_id: str
    auto_score: float
    final_score: Optional[float] = None
    feedback: Optional[str] = None
    strictness: Strictness
    status: GradeStatus
    graded_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class GradeOverrideRead(BaseModel):
    id: str
    grade_id: str
    faculty_id: Optional[str]
    original_score: Optional[float]
    override_score: float
    reason: str
    created_at: datetime

    class Config:
        from_attributes = True
