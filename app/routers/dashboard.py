from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.core.enums import GradeStatus, UserRole
from app.core.permissions import require_faculty, require_student
from app.models.enrollment import Enrollment
from app.models.grade import GradeRecord
from app.models.subject import Subject
from app.models.submission import Submission
from app.models.task import Task
from app.models.user import User
from app.schemas.dashboard import FacultySubjectStats, StudentTaskCard
from app.services.penalty import projection

router = APIRouter()


@router.get("/me/dashboard", response_model=list[StudentTaskCard], tags=["dashboard"])
def student_dashboard(
    db: Session = Depends(get_db),
    me: User = Depends(require_student),
):
    rows = (
        db.query(Task, Subject.name.label("subject_name"), GradeRecord.final_score)
        .join(Subject, Subject.id == Task.subject_id)
        .outerjoin(
            GradeRecord,
            and_(GradeRecord.task_id == Task.id, GradeRecord.student_id == me.id),
        )
        .filter(Task.student_id == me.id)
        .order_by(Task.due_at.asc(), Task.id.asc())
        .all()
    )

    # one clock reading so every card on the page agrees
    now = datetime.now(timezone.utc)

    cards: list[StudentTaskCard] = []
    for task, subject_name, final_score in rows:
        p = projection(task, now)
        cards.append(
            StudentTaskCard(
                task_id=task.id,
                title=task.title,
                subject_id=task.subject_id,
                subject_name=subject_name,
                status=task.status,
                due_at=task.due_at,
                max_score=task.max_score,
                penalty_rate_percent=task.penalty_rate_percent,
                days_remaining=p.days_remaining,
                penalty_fraction=p.penalty_fraction,
                potential_score=round(p.potential_score, 2),
                urgency=p.urgency,
                final_score=final_score,
            )
        )

    return cards


@router.get("/faculty/dashboard", response_model=list[FacultySubjectStats], tags=["dashboard"])
def faculty_dashboard(
    db: Session = Depends(get_db),
    me: User = Depends(require_faculty),
):
    query = db.query(Subject)
    # admins see every subject
    if me.role != UserRole.ADMIN.value:
        query = query.filter(Subject.faculty_id == me.id)
    subjects = query.order_by(Subject.created_at.asc(), Subject.id.asc()).all()

    rows: list[FacultySubjectStats] = []

    for subject in subjects:
        total_students = (
            db.query(func.count(Enrollment.id))
            .filter(Enrollment.subject_id == subject.id)
            .scalar()
        ) or 0

        total_tasks = (
            db.query(func.count(Task.id))
            .filter(Task.subject_id == subject.id)
            .scalar()
        ) or 0

        total_submissions = (
            db.query(func.count(Submission.id))
            .join(Task, Submission.task_id == Task.id)
            .filter(Task.subject_id == subject.id)
            .scalar()
        ) or 0

        pending_grades = (
            db.query(func.count(GradeRecord.id))
            .join(Task, GradeRecord.task_id == Task.id)
            .filter(
                Task.subject_id == subject.id,
                GradeRecord.status != GradeStatus.APPROVED.value,
            )
            .scalar()
        ) or 0

        rows.append(
            FacultySubjectStats(
                subject_id=subject.id,
                subject_name=subject.name,
                total_students=total_students,
                total_tasks=total_tasks,
                total_submissions=total_submissions,
                pending_grades=pending_grades,
            )
        )

    return rows
