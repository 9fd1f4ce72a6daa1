from app.models.grade import GradeRecord
from app.models.grade_override import GradeOverride
from app.models.task import Task
from app.repositories.base import BaseRepository


class GradeRepository(BaseRepository[GradeRecord]):
    model = GradeRecord

    def list(self, subject_id: str | None = None, **filters) -> list[GradeRecord]:
        if subject_id is None:
            return super().list(**filters)

        query = (
            self.db.query(GradeRecord)
            .join(Task, Task.id == GradeRecord.task_id)
            .filter(Task.subject_id == subject_id)
        )
        for field, value in filters.items():
            if value is not None:
                query = query.filter(getattr(GradeRecord, field) == value)
        return query.order_by(GradeRecord.created_at.asc()).all()

    def get_for(self, task_id: str, student_id: str) -> GradeRecord | None:
        return (
            self.db.query(GradeRecord)
            .filter(GradeRecord.task_id == task_id, GradeRecord.student_id == student_id)
            .first()
        )

    def exists_for_task(self, task_id: str) -> bool:
        return self.db.query(GradeRecord.id).filter(GradeRecord.task_id == task_id).first() is not None

    def add_override(self, override: GradeOverride) -> GradeOverride:
        self.db.add(override)
        self.db.flush()
        self.db.refresh(override)
        return override
