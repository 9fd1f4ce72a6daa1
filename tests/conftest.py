import os
from datetime import datetime, timedelta, timezone

TEST_DB_FILE = "test_edusprint.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"

# must be set before app.db.session is imported
os.environ["EDUSPRINT_DATABASE_URL"] = TEST_DB_URL

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.deps import get_db  # noqa: E402
from app.core.security import hash_password  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models.enrollment import Enrollment  # noqa: E402
from app.models.grade import GradeRecord  # noqa: E402
from app.models.grade_override import GradeOverride  # noqa: E402
from app.models.subject import Subject  # noqa: E402
from app.models.submission import Submission  # noqa: E402
from app.models.task import Task  # noqa: E402
from app.models.user import User  # noqa: E402

TestingSessionLocal = SessionLocal

PASSWORD = "password123"
# hashing is slow on purpose; do it once
PASSWORD_HASH = hash_password(PASSWORD)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture(autouse=True)
def seed():
    """
    Seed a clean minimal dataset for each test:
    one faculty owning one subject, two enrolled students,
    one task assigned to student1 and due in five days.
    """
    db = TestingSessionLocal()
    try:
        # Clear tables (child -> parent)
        for model in (GradeOverride, GradeRecord, Submission, Task, Enrollment, Subject, User):
            db.query(model).delete()
        db.commit()

        faculty = User(
            email="faculty1@example.com",
            name="Faculty One",
            role="faculty",
            hashed_password=PASSWORD_HASH,
        )
        student1 = User(
            email="student1@example.com",
            name="Student One",
            role="student",
            hashed_password=PASSWORD_HASH,
        )
        student2 = User(
            email="student2@example.com",
            name="Student Two",
            role="student",
            hashed_password=PASSWORD_HASH,
        )
        db.add_all([faculty, student1, student2])
        db.commit()

        subject = Subject(
            name="Data Structures",
            code="CS201",
            description="Arrays, lists, trees and graphs.",
            faculty_id=faculty.id,
        )
        db.add(subject)
        db.commit()

        db.add_all(
            [
                Enrollment(subject_id=subject.id, student_id=student1.id),
                Enrollment(subject_id=subject.id, student_id=student2.id),
            ]
        )

        task = Task(
            subject_id=subject.id,
            student_id=student1.id,
            title="Binary Search Tree Implementation",
            description="Insert, search and delete.",
            definition=["insert", "search", "delete", "unit tests"],
            due_at=datetime.now(timezone.utc) + timedelta(days=5),
            max_score=10,
            penalty_rate_percent=15,
        )
        db.add(task)
        db.commit()

        yield {
            "faculty_id": faculty.id,
            "student1_id": student1.id,
            "student2_id": student2.id,
            "subject_id": subject.id,
            "task_id": task.id,
        }
    finally:
        db.close()


@pytest.fixture()
def client():
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def login(client, email: str, password: str = PASSWORD) -> str:
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["access_token"]


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def faculty_headers(client):
    return auth_header(login(client, "faculty1@example.com"))


@pytest.fixture()
def student_headers(client):
    return auth_header(login(client, "student1@example.com"))


@pytest.fixture()
def other_student_headers(client):
    return auth_header(login(client, "student2@example.com"))
