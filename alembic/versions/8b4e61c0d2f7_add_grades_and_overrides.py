"""add grade records and grade override audit trail

Revision ID: 8b4e61c0d2f7
Revises: 3f1c2a7d9b10
Create Date: 2026-10-14 16:42:51.907312

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8b4e61c0d2f7'
down_revision: Union[str, Sequence[str], None] = '3f1c2a7d9b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "grades",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("task_id", sa.String(length=32), sa.ForeignKey("tasks.id"), nullable=False),
        sa.Column("student_id", sa.String(length=32), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("auto_score", sa.Float(), nullable=False),
        sa.Column("final_score", sa.Float(), nullable=True),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.Column("strictness", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("graded_by", sa.String(length=32), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("task_id", "student_id", name="uq_grade_task_student"),
    )
    op.create_index("ix_grades_task_id", "grades", ["task_id"])
    op.create_index("ix_grades_student_id", "grades", ["student_id"])

    op.create_table(
        "grade_overrides",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("grade_id", sa.String(length=32), sa.ForeignKey("grades.id", ondelete="CASCADE"), nullable=False),
        sa.Column("faculty_id", sa.String(length=32), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("original_score", sa.Float(), nullable=True),
        sa.Column("override_score", sa.Float(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_grade_overrides_grade_id", "grade_overrides", ["grade_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("grade_overrides")
    op.drop_table("grades")
