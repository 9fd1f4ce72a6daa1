from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from app.core.ids import new_id
from app.db.base_class import Base


class GradeOverride(Base):
    """Audit row written every time faculty overrides a grade."""

    __tablename__ = "grade_overrides"

    id = Column(String(32), primary_key=True, default=lambda: new_id("ovr"))
    grade_id = Column(String(32), ForeignKey("grades.id", ondelete="CASCADE"), nullable=False, index=True)
    faculty_id = Column(String(32), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    original_score = Column(Float, nullable=True)
    override_score = Column(Float, nullable=False)
    reason = Column(Text, nullable=False)

    created_at = Column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )

    grade = relationship("GradeRecord", back_populates="overrides")
