from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint, func
from sqlalchemy.orm import relationship

from app.core.ids import new_id
from app.db.base_class import Base

class Submission(Base):
    __tablename__ = "submissions"

    id = Column(String(32), primary_key=True, default=lambda: new_id("sub"))

    task_id = Column(String(32), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    content = Column(Text, nullable=True)

    submitted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("task_id", "student_id", name="uq_submission_task_student"),
    )

    task = relationship("Task", back_populates="submissions")
    student = relationship("User", back_populates="submissions")
