def homework_payload(**overrides):
    payload = {
        "title": "Fractions worksheet",
        "description": "Pages 10-12",
        "due_date": "2024-02-01",
        "teacher_id": "T001",
        "class_id": "C001",
        "subject_id": "SUB001",
    }
    payload.update(overrides)
    return payload


def test_homework_filter_by_teacher(client, teacher_headers):
    data = client.get("/homework", params={"teacher_id": "T001"}, headers=teacher_headers).json()["data"]
    assert [h["homework_id"] for h in data] == ["HW001"]


def test_homework_crud_round(client, teacher_headers):
    created = client.post("/homework", json=homework_payload(), headers=teacher_headers)
    assert created.status_code == 201
    homework = created.json()["data"]
    assert homework["status"] == "pending"
    assert homework["created_at"]

    updated = client.put(f"/homework/{homework['homework_id']}", json={"status": "active"}, headers=teacher_headers)
    assert updated.json()["data"]["status"] == "active"
    assert updated.json()["data"]["title"] == "Fractions worksheet"

    assert client.delete(f"/homework/{homework['homework_id']}", headers=teacher_headers).status_code == 200
    assert client.get(f"/homework/{homework['homework_id']}", headers=teacher_headers).status_code == 404


def test_homework_status_must_be_known(client, teacher_headers):
    response = client.post("/homework", json=homework_payload(status="finished"), headers=teacher_headers)

    assert response.status_code == 400
    assert response.json()["error"].startswith("status:")


def test_homework_update_rejects_null_due_date(client, teacher_headers):
    response = client.put("/homework/HW001", json={"due_date": None}, headers=teacher_headers)

    assert response.status_code == 400
    assert response.json()["error"].startswith("due_date:")


def test_student_cannot_create_homework(client, student_headers):
    assert client.post("/homework", json=homework_payload(), headers=student_headers).status_code == 403


def test_submission_and_grading(client, teacher_headers, student_headers):
    submitted = client.post(
        "/homework/HW001/submissions",
        json={"student_id": "S001", "content": "x = 4"},
        headers=student_headers,
    )
    assert submitted.status_code == 201
    submission_id = submitted.json()["data"]["submission_id"]
    assert submitted.json()["data"]["status"] == "submitted"

    listed = client.get("/homework/HW001/submissions", headers=teacher_headers).json()["data"]
    assert [s["submission_id"] for s in listed] == [submission_id]

    graded = client.put(
        f"/submissions/{submission_id}/grade", json={"grade": "A", "feedback": "Well done"}, headers=teacher_headers
    )
    assert graded.status_code == 200
    data = graded.json()["data"]
    assert data["status"] == "graded"
    assert data["grade"] == "A"
    assert data["graded_by"] == "teacher"
    assert data["graded_at"]


def test_teacher_cannot_submit(client, teacher_headers):
    response = client.post("/homework/HW001/submissions", json={"student_id": "S001"}, headers=teacher_headers)
    assert response.status_code == 403


def test_submission_to_missing_homework_is_404(client, student_headers):
    response = client.post("/homework/HW999/submissions", json={"student_id": "S001"}, headers=student_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "Homework not found"


def test_grading_missing_submission_is_404(client, teacher_headers):
    assert client.put("/submissions/nope/grade", json={"grade": "B"}, headers=teacher_headers).status_code == 404


def test_teacher_dashboard_counts(client, admin_headers, teacher_headers, student_headers):
    for student_id in ("S001", "S002"):
        client.post("/student-classes", json={"student_id": student_id, "class_id": "C001"}, headers=admin_headers)
    submitted = client.post("/homework/HW001/submissions", json={"student_id": "S001"}, headers=student_headers)

    dashboard = client.get("/teacher/T001/dashboard", headers=teacher_headers).json()["data"]
    assert dashboard == {"classes": 1, "homework": 1, "pendingSubmissions": 1, "totalStudents": 2}

    submission_id = submitted.json()["data"]["submission_id"]
    client.put(f"/submissions/{submission_id}/grade", json={"grade": "B"}, headers=teacher_headers)
    dashboard = client.get("/teacher/T001/dashboard", headers=teacher_headers).json()["data"]
    assert dashboard["pendingSubmissions"] == 0
