import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from app.core.current_user import get_current_user
from app.core.deps import get_db
from app.core.enums import TaskStatus, UserRole
from app.core.permissions import require_faculty, require_student
from app.models.submission import Submission
from app.models.task import Task
from app.models.user import User
from app.repositories.grade_repo import GradeRepository
from app.repositories.subject_repo import SubjectRepository
from app.repositories.task_repo import TaskRepository
from app.routers.subjects import ensure_subject_owner, get_subject_or_404
from app.schemas.task import (
    SubmissionRead,
    TaskAssign,
    TaskCreate,
    TaskProjection,
    TaskRead,
    TaskSubmit,
    TaskUpdate,
)
from app.services.penalty import projection
from app.services.task_status import InvalidStatusTransition, ensure_transition

logger = logging.getLogger(__name__)

router = APIRouter()


def get_task_or_404(repo: TaskRepository, task_id: str) -> Task:
    task = repo.get(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


def _move_status(task: Task, target: TaskStatus) -> None:
    try:
        task.status = ensure_transition(task.status, target.value)
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=409, detail=str(e))


def _ensure_assigned_student(task: Task, student: User) -> None:
    if task.student_id != student.id:
        raise HTTPException(status_code=403, detail="Task is not assigned to you")


def _ensure_assignable(db: Session, subject_id: str, student_id: str) -> None:
    student = db.get(User, student_id)
    if not student or student.role != UserRole.STUDENT.value:
        raise HTTPException(status_code=400, detail="Only students can be assigned tasks")
    if not SubjectRepository(db).is_enrolled(subject_id, student_id):
        raise HTTPException(status_code=400, detail="Student is not enrolled in this subject")


@router.get("", response_model=list[TaskRead])
def list_tasks(
    subject_id: Optional[str] = None,
    student_id: Optional[str] = None,
    status_filter: Optional[TaskStatus] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return TaskRepository(db).list(
        subject_id=subject_id,
        student_id=student_id,
        status=status_filter.value if status_filter else None,
    )


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    db: Session = Depends(get_db),
    faculty: User = Depends(require_faculty),
):
    subject = get_subject_or_404(SubjectRepository(db), payload.subject_id)
    ensure_subject_owner(subject, faculty)

    if payload.student_id is not None:
        _ensure_assignable(db, subject.id, payload.student_id)

    task = TaskRepository(db).create(
        Task(
            subject_id=subject.id,
            student_id=payload.student_id,
            title=payload.title,
            description=payload.description,
            definition=payload.definition,
            due_at=payload.due_at,
            weight=payload.weight,
            max_score=payload.max_score,
            penalty_rate_percent=payload.penalty_rate_percent,
        )
    )
    db.commit()
    db.refresh(task)

    logger.info("Faculty %s created task %s in subject %s", faculty.id, task.id, subject.id)
    return task


@router.get("/{task_id}", response_model=TaskRead)
def get_task(
    task_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_task_or_404(TaskRepository(db), task_id)


@router.patch("/{task_id}", response_model=TaskRead)
def update_task(
    task_id: str,
    payload: TaskUpdate,
    db: Session = Depends(get_db),
    faculty: User = Depends(require_faculty),
):
    repo = TaskRepository(db)
    task = get_task_or_404(repo, task_id)
    ensure_subject_owner(task.subject, faculty)

    changes = payload.model_dump(exclude_unset=True)
    # null clears the description; the other columns are NOT NULL
    changes = {k: v for k, v in changes.items() if v is not None or k == "description"}

    # the rate is locked as soon as anyone has handed work in
    if "penalty_rate_percent" in changes and repo.has_submissions(task.id):
        raise HTTPException(
            status_code=409,
            detail="Penalty rate cannot change after a submission",
        )

    task = repo.update(task, changes)
    db.commit()
    db.refresh(task)
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    db: Session = Depends(get_db),
    faculty: User = Depends(require_faculty),
):
    repo = TaskRepository(db)
    task = get_task_or_404(repo, task_id)
    ensure_subject_owner(task.subject, faculty)

    if GradeRepository(db).exists_for_task(task.id):
        raise HTTPException(status_code=409, detail="Task is referenced by a grade record")

    repo.delete(task)
    db.commit()

    logger.info("Faculty %s deleted task %s", faculty.id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{task_id}/assign", response_model=TaskRead)
def assign_task(
    task_id: str,
    payload: TaskAssign,
    db: Session = Depends(get_db),
    faculty: User = Depends(require_faculty),
):
    repo = TaskRepository(db)
    task = get_task_or_404(repo, task_id)
    ensure_subject_owner(task.subject, faculty)

    if task.status != TaskStatus.NOT_STARTED.value:
        raise HTTPException(status_code=409, detail="Task already under way")
    _ensure_assignable(db, task.subject_id, payload.student_id)

    task = repo.update(task, {"student_id": payload.student_id})
    db.commit()
    db.refresh(task)

    logger.info("Assigned task %s to student %s", task.id, payload.student_id)
    return task


@router.post("/{task_id}/start", response_model=TaskRead)
def start_task(
    task_id: str,
    db: Session = Depends(get_db),
    me: User = Depends(require_student),
):
    task = get_task_or_404(TaskRepository(db), task_id)
    _ensure_assigned_student(task, me)

    _move_status(task, TaskStatus.IN_PROGRESS)
    db.commit()
    db.refresh(task)
    return task


@router.post(
    "/{task_id}/submit",
    response_model=SubmissionRead,
    status_code=status.HTTP_201_CREATED,
)
def submit_task(
    task_id: str,
    payload: TaskSubmit,
    db: Session = Depends(get_db),
    me: User = Depends(require_student),
):
    repo = TaskRepository(db)
    task = get_task_or_404(repo, task_id)
    _ensure_assigned_student(task, me)

    now = datetime.now(timezone.utc)
    existing = repo.get_submission(task.id, me.id)

    if existing:
        # resubmission replaces the previous work until a grade record exists
        if GradeRepository(db).get_for(task.id, me.id):
            raise HTTPException(status_code=409, detail="Submission already graded")
        existing.content = payload.content
        existing.submitted_at = now
        submission = existing
    else:
        _move_status(task, TaskStatus.SUBMITTED)
        submission = Submission(
            task_id=task.id,
            student_id=me.id,
            content=payload.content,
            submitted_at=now,
        )
        db.add(submission)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(submission)

    logger.info("Student %s submitted task %s", me.id, task.id)
    return submission


@router.get("/{task_id}/projection", response_model=TaskProjection)
def project_task_score(
    task_id: str,
    at: Optional[datetime] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = get_task_or_404(TaskRepository(db), task_id)

    now = at or datetime.now(timezone.utc)
    p = projection(task, now)

    return TaskProjection(
        task_id=task.id,
        at=now,
        max_score=task.max_score,
        penalty_rate_percent=task.penalty_rate_percent,
        days_remaining=p.days_remaining,
        penalty_fraction=p.penalty_fraction,
        potential_score=p.potential_score,
        urgency=p.urgency,
    )
