from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from app.core.config import DEFAULT_PENALTY_RATE_PERCENT, DEFAULT_TASK_WEIGHT
from app.core.enums import TaskStatus
from app.core.ids import new_id
from app.db.base_class import Base


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(32), primary_key=True, default=lambda: new_id("task"))
    subject_id = Column(String(32), ForeignKey("subjects.id"), nullable=False, index=True)
    student_id = Column(String(32), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    definition = Column(JSON, nullable=False, default=list)

    status = Column(String(20), nullable=False, default=TaskStatus.NOT_STARTED.value)
    due_at = Column(DateTime(timezone=True), nullable=False)
    weight = Column(Integer, nullable=False, default=DEFAULT_TASK_WEIGHT)
    max_score = Column(Float, nullable=False)
    penalty_rate_percent = Column(Float, nullable=False, default=DEFAULT_PENALTY_RATE_PERCENT)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    subject = relationship("Subject", back_populates="tasks")

    submissions = relationship("Submission", back_populates="task", cascade="all, delete-orphan")
    grades = relationship("GradeRecord", back_populates="task")
