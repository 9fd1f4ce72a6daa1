from app.models.enrollment import Enrollment
from app.models.subject import Subject
from app.models.task import Task
from app.repositories.base import BaseRepository


class SubjectRepository(BaseRepository[Subject]):
    model = Subject

    def list(self, student_id: str | None = None, **filters) -> list[Subject]:
        """``student_id`` narrows the list to subjects that student is enrolled in."""
        if student_id is None:
            return super().list(**filters)

        query = (
            self.db.query(Subject)
            .join(Enrollment, Enrollment.subject_id == Subject.id)
            .filter(Enrollment.student_id == student_id)
        )
        for field, value in filters.items():
            if value is not None:
                query = query.filter(getattr(Subject, field) == value)
        return query.order_by(Subject.created_at.asc()).all()

    def get_enrollment(self, subject_id: str, student_id: str) -> Enrollment | None:
        return (
            self.db.query(Enrollment)
            .filter(
                Enrollment.subject_id == subject_id,
                Enrollment.student_id == student_id,
            )
            .first()
        )

    def is_enrolled(self, subject_id: str, student_id: str) -> bool:
        return self.get_enrollment(subject_id, student_id) is not None

    def enroll(self, subject_id: str, student_id: str) -> Enrollment:
        enrollment = Enrollment(subject_id=subject_id, student_id=student_id)
        self.db.add(enrollment)
        self.db.flush()
        self.db.refresh(enrollment)
        return enrollment

    def unenroll(self, enrollment: Enrollment) -> None:
        self.db.delete(enrollment)
        self.db.flush()

    def has_assigned_tasks(self, subject_id: str, student_id: str) -> bool:
        return (
            self.db.query(Task.id)
            .filter(Task.subject_id == subject_id, Task.student_id == student_id)
            .first()
            is not None
        )
