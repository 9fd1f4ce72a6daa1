from app.models.submission import Submission
from app.models.task import Task
from app.repositories.base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    model = Task

    def _default_order(self) -> tuple:
        return (Task.due_at.asc(), Task.id.asc())

    def get_submission(self, task_id: str, student_id: str) -> Submission | None:
        return (
            self.db.query(Submission)
            .filter(Submission.task_id == task_id, Submission.student_id == student_id)
            .first()
        )

    def has_submissions(self, task_id: str) -> bool:
        return self.db.query(Submission.id).filter(Submission.task_id == task_id).first() is not None
