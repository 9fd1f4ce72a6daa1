from datetime import datetime, timedelta, timezone

import pytest

from app.db.session import SessionLocal
from app.models.submission import Submission
from app.models.task import Task


@pytest.fixture()
def submitted(client, student_headers, seed):
    r = client.post(
        f"/tasks/{seed['task_id']}/submit",
        headers=student_headers,
        json={"content": "class BST: ..."},
    )
    assert r.status_code == 201, r.text
    return seed


def _grade(client, headers, task_id, **extra):
    payload = {"task_id": task_id}
    payload.update(extra)
    return client.post("/grades", headers=headers, json=payload)


def test_cannot_grade_before_submission(client, faculty_headers, seed):
    r = _grade(client, faculty_headers, seed["task_id"], auto_score=8)
    assert r.status_code == 409


def test_create_grade_with_explicit_score(client, faculty_headers, submitted):
    r = _grade(
        client,
        faculty_headers,
        submitted["task_id"],
        auto_score=8.5,
        feedback="Missing some edge cases.",
        strictness="hard",
    )
    assert r.status_code == 201, r.text
    grade = r.json()
    assert grade["id"].startswith("grade_")
    assert grade["student_id"] == submitted["student1_id"]
    assert grade["auto_score"] == 8.5
    assert grade["final_score"] is None
    assert grade["status"] == "pending"
    assert grade["strictness"] == "hard"
    assert grade["graded_by"] == submitted["faculty_id"]


def test_auto_score_defaults_to_projection_at_submission(client, faculty_headers, submitted):
    # pin the submission to exactly one day before the deadline: 15 - 1 * 2 = 13% off
    db = SessionLocal()
    try:
        task = db.get(Task, submitted["task_id"])
        sub = db.query(Submission).filter(Submission.task_id == task.id).one()
        due = task.due_at if task.due_at.tzinfo else task.due_at.replace(tzinfo=timezone.utc)
        sub.submitted_at = due - timedelta(days=1)
        db.commit()
    finally:
        db.close()

    r = _grade(client, faculty_headers, submitted["task_id"])
    assert r.status_code == 201, r.text
    assert r.json()["auto_score"] == pytest.approx(8.7)


def test_score_out_of_range(client, faculty_headers, submitted):
    r = _grade(client, faculty_headers, submitted["task_id"], auto_score=11)
    assert r.status_code == 400


def test_duplicate_grade(client, faculty_headers, submitted):
    assert _grade(client, faculty_headers, submitted["task_id"], auto_score=5).status_code == 201
    assert _grade(client, faculty_headers, submitted["task_id"], auto_score=6).status_code == 409


def test_student_cannot_grade(client, student_headers, submitted):
    r = _grade(client, student_headers, submitted["task_id"], auto_score=10)
    assert r.status_code == 403


def test_review_then_approve(client, faculty_headers, student_headers, submitted):
    grade = _grade(client, faculty_headers, submitted["task_id"], auto_score=9).json()

    r = client.post(
        f"/grades/{grade['id']}/review",
        headers=faculty_headers,
        json={"feedback": "Solid work.", "strictness": "loose"},
    )
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "reviewed"
    assert r.json()["feedback"] == "Solid work."
    assert r.json()["strictness"] == "loose"

    r = client.post(f"/grades/{grade['id']}/approve", headers=faculty_headers)
    assert r.status_code == 200
    assert r.json()["status"] == "approved"
    assert r.json()["final_score"] == 9

    task = client.get(f"/tasks/{submitted['task_id']}", headers=student_headers).json()
    assert task["status"] == "graded"

    r = client.post(f"/grades/{grade['id']}/review", headers=faculty_headers, json={})
    assert r.status_code == 409

    r = client.post(
        f"/tasks/{submitted['task_id']}/submit", headers=student_headers, json={"content": "late fix"}
    )
    assert r.status_code == 409


def test_override_records_audit_trail(client, faculty_headers, student_headers, submitted):
    grade = _grade(client, faculty_headers, submitted["task_id"], auto_score=6).json()

    r = client.post(
        "/grades/override",
        headers=faculty_headers,
        json={
            "task_id": submitted["task_id"],
            "student_id": submitted["student1_id"],
            "final_score": 8,
            "reason": "Partial credit for the delete operation.",
        },
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["final_score"] == 8
    assert body["auto_score"] == 6
    assert body["status"] == "approved"

    r = client.post(
        "/grades/override",
        headers=faculty_headers,
        json={
            "task_id": submitted["task_id"],
            "student_id": submitted["student1_id"],
            "final_score": 9,
            "reason": "Regrade request accepted.",
        },
    )
    assert r.status_code == 200

    r = client.get(f"/grades/{grade['id']}/overrides", headers=student_headers)
    assert r.status_code == 200
    trail = r.json()
    assert [(o["original_score"], o["override_score"]) for o in trail] == [(8, 9), (6, 8)]

    task = client.get(f"/tasks/{submitted['task_id']}", headers=student_headers).json()
    assert task["status"] == "graded"


def test_override_validation(client, faculty_headers, submitted):
    _grade(client, faculty_headers, submitted["task_id"], auto_score=6)

    base = {"task_id": submitted["task_id"], "student_id": submitted["student1_id"]}

    r = client.post("/grades/override", headers=faculty_headers, json={**base, "final_score": 50, "reason": "x"})
    assert r.status_code == 400

    r = client.post("/grades/override", headers=faculty_headers, json={**base, "final_score": 5, "reason": ""})
    assert r.status_code == 422

    r = client.post(
        "/grades/override",
        headers=faculty_headers,
        json={**base, "student_id": submitted["student2_id"], "final_score": 5, "reason": "x"},
    )
    assert r.status_code == 404


def test_list_and_get_grades(client, faculty_headers, student_headers, submitted):
    grade = _grade(client, faculty_headers, submitted["task_id"], auto_score=7).json()

    r = client.get("/grades", params={"student_id": submitted["student1_id"]}, headers=student_headers)
    assert [g["id"] for g in r.json()] == [grade["id"]]

    r = client.get("/grades", params={"subject_id": submitted["subject_id"]}, headers=student_headers)
    assert len(r.json()) == 1

    r = client.get("/grades", params={"subject_id": "subject_missing"}, headers=student_headers)
    assert r.json() == []

    r = client.get("/grades", params={"status": "approved"}, headers=student_headers)
    assert r.json() == []

    r = client.get(f"/grades/{grade['id']}", headers=student_headers)
    assert r.status_code == 200
    assert r.json()["auto_score"] == 7

    assert client.get("/grades/grade_missing", headers=student_headers).status_code == 404


def test_submission_time_is_recorded_in_utc(client, student_headers, seed):
    before = datetime.now(timezone.utc)
    r = client.post(f"/tasks/{seed['task_id']}/submit", headers=student_headers, json={})
    submitted_at = datetime.fromisoformat(r.json()["submitted_at"])
    if submitted_at.tzinfo is None:
        submitted_at = submitted_at.replace(tzinfo=timezone.utc)
    assert submitted_at >= before - timedelta(seconds=1)


def test_resubmission_refused_once_graded(client, faculty_headers, student_headers, submitted):
    r = _grade(client, faculty_headers, submitted["task_id"], auto_score=7)
    assert r.status_code == 201

    r = client.post(
        f"/tasks/{submitted['task_id']}/submit", headers=student_headers, json={"content": "swapped"}
    )
    assert r.status_code == 409

    db = SessionLocal()
    try:
        sub = db.query(Submission).filter(Submission.task_id == submitted["task_id"]).one()
        assert sub.content == "class BST: ..."
    finally:
        db.close()
