import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.current_user import get_current_user
from app.core.deps import get_db
from app.core.enums import UserRole
from app.core.permissions import require_faculty, require_student
from app.models.subject import Subject
from app.models.user import User
from app.repositories.subject_repo import SubjectRepository
from app.schemas.subject import EnrollmentRead, SubjectCreate, SubjectRead, SubjectUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def get_subject_or_404(repo: SubjectRepository, subject_id: str) -> Subject:
    subject = repo.get(subject_id)
    if not subject:
        raise HTTPException(status_code=404, detail="Subject not found")
    return subject


def ensure_subject_owner(subject: Subject, user: User) -> None:
    if user.role == UserRole.ADMIN.value:
        return
    if subject.faculty_id != user.id:
        raise HTTPException(status_code=403, detail="Only the subject's faculty can do this")


@router.get("", response_model=list[SubjectRead])
def list_subjects(
    faculty_id: Optional[str] = None,
    student_id: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return SubjectRepository(db).list(student_id=student_id, faculty_id=faculty_id)


@router.post("", response_model=SubjectRead, status_code=status.HTTP_201_CREATED)
def create_subject(
    payload: SubjectCreate,
    db: Session = Depends(get_db),
    faculty: User = Depends(require_faculty),
):
    repo = SubjectRepository(db)
    subject = repo.create(
        Subject(
            name=payload.name,
            code=payload.code,
            description=payload.description,
            faculty_id=faculty.id,
        )
    )
    db.commit()
    db.refresh(subject)

    logger.info("Faculty %s created subject %s (%s)", faculty.id, subject.id, subject.code)
    return subject


@router.get("/{subject_id}", response_model=SubjectRead)
def get_subject(
    subject_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_subject_or_404(SubjectRepository(db), subject_id)


@router.patch("/{subject_id}", response_model=SubjectRead)
def update_subject(
    subject_id: str,
    payload: SubjectUpdate,
    db: Session = Depends(get_db),
    faculty: User = Depends(require_faculty),
):
    repo = SubjectRepository(db)
    subject = get_subject_or_404(repo, subject_id)
    ensure_subject_owner(subject, faculty)

    changes = payload.model_dump(exclude_unset=True)
    changes = {k: v for k, v in changes.items() if v is not None or k == "description"}

    subject = repo.update(subject, changes)
    db.commit()
    db.refresh(subject)
    return subject


@router.delete("/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subject(
    subject_id: str,
    db: Session = Depends(get_db),
    faculty: User = Depends(require_faculty),
):
    repo = SubjectRepository(db)
    subject = get_subject_or_404(repo, subject_id)
    ensure_subject_owner(subject, faculty)

    if subject.tasks:
        raise HTTPException(status_code=409, detail="Subject still has tasks")

    repo.delete(subject)
    db.commit()

    logger.info("Faculty %s deleted subject %s", faculty.id, subject_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{subject_id}/enroll",
    response_model=EnrollmentRead,
    status_code=status.HTTP_201_CREATED,
)
def enroll_me(
    subject_id: str,
    db: Session = Depends(get_db),
    me: User = Depends(require_student),
):
    repo = SubjectRepository(db)
    get_subject_or_404(repo, subject_id)

    try:
        enrollment = repo.enroll(subject_id, me.id)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Already enrolled")

    db.refresh(enrollment)
    return enrollment


@router.delete("/{subject_id}/enroll", status_code=status.HTTP_204_NO_CONTENT)
def unenroll_me(
    subject_id: str,
    db: Session = Depends(get_db),
    me: User = Depends(require_student),
):
    repo = SubjectRepository(db)
    get_subject_or_404(repo, subject_id)

    enrollment = repo.get_enrollment(subject_id, me.id)
    if not enrollment:
        raise HTTPException(status_code=404, detail="Not enrolled in this subject")

    # tasks keep pointing at the student, so they must be reassigned first
    if repo.has_assigned_tasks(subject_id, me.id):
        raise HTTPException(status_code=409, detail="Student still has tasks in this subject")

    repo.unenroll(enrollment)
    db.commit()

    logger.info("Student %s left subject %s", me.id, subject_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
