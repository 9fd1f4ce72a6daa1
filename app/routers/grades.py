import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.current_user import get_current_user
from app.core.deps import get_db
from app.core.enums import GradeStatus, TaskStatus
from app.core.permissions import require_faculty
from app.models.grade import GradeRecord
from app.models.grade_override import GradeOverride
from app.models.task import Task
from app.models.user import User
from app.repositories.grade_repo import GradeRepository
from app.repositories.task_repo import TaskRepository
from app.routers.subjects import ensure_subject_owner
from app.routers.tasks import get_task_or_404
from app.schemas.grade import (
    GradeCreate,
    GradeOverrideRead,
    GradeOverrideRequest,
    GradeRead,
    GradeReview,
)
from app.services.penalty import project_score
from app.services.task_status import can_transition

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_grade_or_404(repo: GradeRepository, grade_id: str) -> GradeRecord:
    grade = repo.get(grade_id)
    if not grade:
        raise HTTPException(status_code=404, detail="Grade record not found")
    return grade


def _ensure_score_in_range(score: float, task: Task) -> None:
    if score < 0 or score > task.max_score:
        raise HTTPException(
            status_code=400,
            detail=f"score must be between 0 and {task.max_score}",
        )


def _mark_task_graded(task: Task) -> None:
    # approving twice (or overriding an approved grade) leaves the task where it is
    if can_transition(task.status, TaskStatus.GRADED.value):
        task.status = TaskStatus.GRADED.value


def _commit(db: Session) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


@router.get("", response_model=list[GradeRead])
def list_grades(
    task_id: Optional[str] = None,
    student_id: Optional[str] = None,
    subject_id: Optional[str] = None,
    status_filter: Optional[GradeStatus] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return GradeRepository(db).list(
        subject_id=subject_id,
        task_id=task_id,
        student_id=student_id,
        status=status_filter.value if status_filter else None,
    )


@router.post("", response_model=GradeRead, status_code=status.HTTP_201_CREATED)
def create_grade(
    payload: GradeCreate,
    db: Session = Depends(get_db),
    faculty: User = Depends(require_faculty),
):
    task_repo = TaskRepository(db)
    task = get_task_or_404(task_repo, payload.task_id)
    ensure_subject_owner(task.subject, faculty)

    student_id = payload.student_id or task.student_id
    if student_id is None:
        raise HTTPException(status_code=400, detail="Task has no assigned student")

    submission = task_repo.get_submission(task.id, student_id)
    if submission is None:
        raise HTTPException(status_code=409, detail="Task must be submitted before grading")

    if payload.auto_score is None:
        # freeze the potential score the student had when handing in
        auto_score = round(project_score(task, submission.submitted_at), 2)
    else:
        auto_score = payload.auto_score
        _ensure_score_in_range(auto_score, task)

    repo = GradeRepository(db)
    try:
        grade = repo.create(
            GradeRecord(
                task_id=task.id,
                student_id=student_id,
                auto_score=auto_score,
                feedback=payload.feedback,
                strictness=payload.strictness.value,
                graded_by=faculty.id,
            )
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Grade record already exists")

    db.refresh(grade)

    logger.info(
        "Faculty %s graded task %s for student %s: auto_score=%s",
        faculty.id,
        task.id,
        student_id,
        auto_score,
    )
    return grade


@router.post("/override", response_model=GradeRead)
def override_grade(
    payload: GradeOverrideRequest,
    db: Session = Depends(get_db),
    faculty: User = Depends(require_faculty),
):
    task = get_task_or_404(TaskRepository(db), payload.task_id)
    ensure_subject_owner(task.subject, faculty)

    repo = GradeRepository(db)
    grade = repo.get_for(payload.task_id, payload.student_id)
    if not grade:
        raise HTTPException(status_code=404, detail="Grade record not found")

    _ensure_score_in_range(payload.final_score, task)

    original = grade.final_score if grade.final_score is not None else grade.auto_score
    repo.add_override(
        GradeOverride(
            grade_id=grade.id,
            faculty_id=faculty.id,
            original_score=original,
            override_score=payload.final_score,
            reason=payload.reason,
        )
    )

    repo.update(
        grade,
        {
            "final_score": payload.final_score,
            "status": GradeStatus.APPROVED.value,
            "graded_by": faculty.id,
        },
    )
    _mark_task_graded(task)
    _commit(db)
    db.refresh(grade)

    logger.info(
        "Faculty %s overrode grade %s: %s -> %s (%s)",
        faculty.id,
        grade.id,
        original,
        payload.final_score,
        payload.reason,
    )
    return grade


@router.get("/{grade_id}", response_model=GradeRead)
def get_grade(
    grade_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_grade_or_404(GradeRepository(db), grade_id)


@router.post("/{grade_id}/review", response_model=GradeRead)
def review_grade(
    grade_id: str,
    payload: GradeReview,
    db: Session = Depends(get_db),
    faculty: User = Depends(require_faculty),
):
    repo = GradeRepository(db)
    grade = _get_grade_or_404(repo, grade_id)
    ensure_subject_owner(grade.task.subject, faculty)

    if grade.status == GradeStatus.APPROVED.value:
        raise HTTPException(status_code=409, detail="Grade already approved")

    changes = {"status": GradeStatus.REVIEWED.value, "graded_by": faculty.id}
    if payload.feedback is not None:
        changes["feedback"] = payload.feedback
    if payload.strictness is not None:
        changes["strictness"] = payload.strictness.value

    repo.update(grade, changes)
    _commit(db)
    db.refresh(grade)
    return grade


@router.post("/{grade_id}/approve", response_model=GradeRead)
def approve_grade(
    grade_id: str,
    db: Session = Depends(get_db),
    faculty: User = Depends(require_faculty),
):
    repo = GradeRepository(db)
    grade = _get_grade_or_404(repo, grade_id)
    task = grade.task
    ensure_subject_owner(task.subject, faculty)

    changes = {"status": GradeStatus.APPROVED.value, "graded_by": faculty.id}
    if grade.final_score is None:
        changes["final_score"] = grade.auto_score

    repo.update(grade, changes)
    _mark_task_graded(task)
    _commit(db)
    db.refresh(grade)

    logger.info("Faculty %s approved grade %s", faculty.id, grade.id)
    return grade


@router.get("/{grade_id}/overrides", response_model=list[GradeOverrideRead])
def list_grade_overrides(
    grade_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    grade = _get_grade_or_404(GradeRepository(db), grade_id)
    return grade.overrides
