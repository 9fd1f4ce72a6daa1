from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.core.enums import TaskStatus, Urgency


class StudentTaskCard(BaseModel):
    task_id: str
    title: str
    subject_id: str
    subject_name: str
    status: TaskStatus
    due_at: datetime
    max_score: float
    penalty_rate_percent: float
    days_remaining: int
    penalty_fraction: float
    potential_score: float
    urgency: Urgency
    final_score: Optional[float] = None


class FacultySubjectStats(BaseModel):
    subject_id: str
    subject_name: str
    total_students: int
    total_tasks: int
    total_submissions: int
    pending_grades: int
