from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import relationship

from app.core.ids import new_id
from app.db.base_class import Base


class Enrollment(Base):
    __tablename__ = "enrollments"

    id = Column(String(32), primary_key=True, default=lambda: new_id("enr"))
    student_id = Column(
        String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    subject_id = Column(
        String(32),
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint(
            "student_id", "subject_id", name="uq_enrollments_student_subject"
        ),
    )

    student = relationship("User", back_populates="enrollments")
    subject = relationship("Subject", back_populates="enrollments")
