def test_list_subjects(client, seed, student_headers):
    r = client.get("/subjects", headers=student_headers)
    assert r.status_code == 200
    rows = r.json()
    assert [s["id"] for s in rows] == [seed["subject_id"]]
    assert rows[0]["students"] == 2


def test_list_subjects_filtered_by_faculty(client, seed, student_headers):
    r = client.get("/subjects", params={"faculty_id": "user_nobody"}, headers=student_headers)
    assert r.status_code == 200
    assert r.json() == []

    r = client.get("/subjects", params={"faculty_id": seed["faculty_id"]}, headers=student_headers)
    assert len(r.json()) == 1


def test_faculty_creates_and_updates_subject(client, faculty_headers, seed):
    r = client.post(
        "/subjects",
        headers=faculty_headers,
        json={"name": "Algorithms", "code": "CS202", "description": "Design and analysis."},
    )
    assert r.status_code == 201, r.text
    created = r.json()
    assert created["faculty_id"] == seed["faculty_id"]
    assert created["students"] == 0

    r = client.patch(
        f"/subjects/{created['id']}",
        headers=faculty_headers,
        json={"description": "Design, analysis and optimisation."},
    )
    assert r.status_code == 200
    assert r.json()["description"] == "Design, analysis and optimisation."
    assert r.json()["code"] == "CS202"


def test_student_cannot_create_subject(client, student_headers):
    r = client.post("/subjects", headers=student_headers, json={"name": "X", "code": "X1"})
    assert r.status_code == 403


def test_get_missing_subject(client, student_headers):
    assert client.get("/subjects/subject_missing", headers=student_headers).status_code == 404


def test_cannot_delete_subject_with_tasks(client, faculty_headers, seed):
    r = client.delete(f"/subjects/{seed['subject_id']}", headers=faculty_headers)
    assert r.status_code == 409


def test_delete_empty_subject(client, faculty_headers):
    created = client.post(
        "/subjects", headers=faculty_headers, json={"name": "Empty", "code": "E0"}
    ).json()
    r = client.delete(f"/subjects/{created['id']}", headers=faculty_headers)
    assert r.status_code == 204
    assert client.get(f"/subjects/{created['id']}", headers=faculty_headers).status_code == 404


def test_enroll_once(client, faculty_headers):
    subject = client.post(
        "/subjects", headers=faculty_headers, json={"name": "Web Development", "code": "CS251"}
    ).json()

    client.post(
        "/auth/signup",
        json={"name": "Fresh", "email": "fresh@example.com", "password": "password123"},
    )
    token = client.post(
        "/auth/login", json={"email": "fresh@example.com", "password": "password123"}
    ).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    r = client.post(f"/subjects/{subject['id']}/enroll", headers=headers)
    assert r.status_code == 201, r.text
    assert r.json()["subject_id"] == subject["id"]

    r = client.post(f"/subjects/{subject['id']}/enroll", headers=headers)
    assert r.status_code == 409


def test_faculty_cannot_enroll(client, faculty_headers, seed):
    r = client.post(f"/subjects/{seed['subject_id']}/enroll", headers=faculty_headers)
    assert r.status_code == 403


def test_list_subjects_filtered_by_student(client, faculty_headers, student_headers, seed):
    other = client.post(
        "/subjects", headers=faculty_headers, json={"name": "Compilers", "code": "CS301"}
    ).json()

    r = client.get("/subjects", params={"student_id": seed["student1_id"]}, headers=student_headers)
    assert r.status_code == 200
    assert [s["id"] for s in r.json()] == [seed["subject_id"]]

    r = client.get("/subjects", params={"student_id": "user_nobody"}, headers=student_headers)
    assert r.json() == []

    r = client.get("/subjects", headers=student_headers)
    assert {s["id"] for s in r.json()} == {seed["subject_id"], other["id"]}


def test_unenroll(client, other_student_headers, seed):
    r = client.delete(f"/subjects/{seed['subject_id']}/enroll", headers=other_student_headers)
    assert r.status_code == 204

    r = client.get(f"/subjects/{seed['subject_id']}", headers=other_student_headers)
    assert r.json()["students"] == 1

    r = client.delete(f"/subjects/{seed['subject_id']}/enroll", headers=other_student_headers)
    assert r.status_code == 404

    r = client.post(f"/subjects/{seed['subject_id']}/enroll", headers=other_student_headers)
    assert r.status_code == 201


def test_unenroll_refused_with_assigned_tasks(client, student_headers, seed):
    r = client.delete(f"/subjects/{seed['subject_id']}/enroll", headers=student_headers)
    assert r.status_code == 409

    r = client.get(f"/subjects/{seed['subject_id']}", headers=student_headers)
    assert r.json()["students"] == 2


def test_unenroll_missing_subject(client, student_headers):
    r = client.delete("/subjects/subject_missing/enroll", headers=student_headers)
    assert r.status_code == 404


def test_faculty_cannot_unenroll(client, faculty_headers, seed):
    r = client.delete(f"/subjects/{seed['subject_id']}/enroll", headers=faculty_headers)
    assert r.status_code == 403


def test_patch_null_clears_subject_description(client, faculty_headers, seed):
    r = client.patch(
        f"/subjects/{seed['subject_id']}",
        headers=faculty_headers,
        json={"description": None, "name": None},
    )
    assert r.status_code == 200, r.text
    assert r.json()["description"] is None
    assert r.json()["name"] == "Data Structures"
