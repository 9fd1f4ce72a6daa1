from sqlalchemy import Column, DateTime, Float, ForeignKey, String, Text, UniqueConstraint, func
from sqlalchemy.orm import relationship

from app.core.enums import GradeStatus, Strictness
from app.core.ids import new_id
from app.db.base_class import Base


class GradeRecord(Base):
    __tablename__ = "grades"

    id = Column(String(32), primary_key=True, default=lambda: new_id("grade"))

    task_id = Column(String(32), ForeignKey("tasks.id"), nullable=False, index=True)
    student_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    auto_score = Column(Float, nullable=False)
    # faculty-set value; supersedes auto_score once present
    final_score = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)
    strictness = Column(String(20), nullable=False, default=Strictness.MEDIUM.value)
    status = Column(String(20), nullable=False, default=GradeStatus.PENDING.value)

    graded_by = Column(String(32), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("task_id", "student_id", name="uq_grade_task_student"),
    )

    task = relationship("Task", back_populates="grades")
    overrides = relationship(
        "GradeOverride",
        back_populates="grade",
        cascade="all, delete-orphan",
        order_by="GradeOverride.created_at.desc()",
    )
