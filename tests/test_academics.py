def test_class_crud_round(client, admin_headers, teacher_headers):
    created = client.post("/classes", json={"name": "Chemistry", "teacher_id": "T003"}, headers=admin_headers)
    assert created.status_code == 201
    class_id = created.json()["data"]["class_id"]

    updated = client.put(f"/classes/{class_id}", json={"name": "Organic Chemistry"}, headers=admin_headers)
    assert updated.json()["data"] == {"class_id": class_id, "name": "Organic Chemistry", "teacher_id": "T003"}

    assert client.get(f"/classes/{class_id}", headers=teacher_headers).status_code == 200

    deleted = client.delete(f"/classes/{class_id}", headers=admin_headers)
    assert deleted.status_code == 200
    assert deleted.json()["data"]["name"] == "Organic Chemistry"
    assert client.get(f"/classes/{class_id}", headers=admin_headers).status_code == 404


def test_class_name_required(client, admin_headers):
    response = client.post("/classes", json={"name": ""}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"].startswith("name:")


def test_null_class_and_subject_names_are_400(client, admin_headers):
    for path in ("/classes/C001", "/subjects/SUB001"):
        response = client.put(path, json={"name": None}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "name: Value error, must not be null"


def test_class_search(client, admin_headers):
    data = client.get("/classes", params={"search": "Physics"}, headers=admin_headers).json()["data"]
    assert [c["class_id"] for c in data] == ["C003"]


def test_subject_crud_round(client, admin_headers):
    created = client.post(
        "/subjects", json={"subject_id": "SUB900", "name": "Drama", "description": "Stagecraft"}, headers=admin_headers
    )
    assert created.status_code == 201

    listed = client.get("/subjects", headers=admin_headers).json()["data"]
    assert [s["name"] for s in listed] == ["Drama", "English", "Mathematics", "Physics"]

    assert client.put("/subjects/SUB900", json={"description": "Theatre"}, headers=admin_headers).json()["data"][
        "description"
    ] == "Theatre"
    assert client.delete("/subjects/SUB900", headers=admin_headers).status_code == 200
    assert client.get("/subjects/SUB900", headers=admin_headers).json()["error"] == "Subject not found"


def test_teacher_cannot_create_subject(client, teacher_headers):
    assert client.post("/subjects", json={"name": "Drama"}, headers=teacher_headers).status_code == 403


def test_student_class_assignment(client, admin_headers, student_headers):
    link = {"student_id": "S001", "class_id": "C001"}
    response = client.post("/student-classes", json=link, headers=admin_headers)
    assert response.status_code == 201
    assert response.json()["data"] == {**link, "unassigned": False}

    students = client.get("/classes/C001/students", headers=admin_headers).json()["data"]
    assert [s["student_id"] for s in students] == ["S001"]

    classes = client.get("/students/S001/classes", headers=student_headers).json()["data"]
    assert [c["class_id"] for c in classes] == ["C001"]

    removed = client.request("DELETE", "/student-classes", json=link, headers=admin_headers)
    assert removed.status_code == 200
    assert removed.json()["data"]["unassigned"] is True
    assert client.get("/classes/C001/students", headers=admin_headers).json()["data"] == []


def test_duplicate_assignment_is_400(client, admin_headers):
    link = {"student_id": "S001", "class_id": "C001"}
    client.post("/student-classes", json=link, headers=admin_headers)

    response = client.post("/student-classes", json=link, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Failed to assign student to class"


def test_unassigning_missing_link_still_succeeds(client, admin_headers):
    response = client.request(
        "DELETE", "/student-classes", json={"student_id": "S003", "class_id": "C002"}, headers=admin_headers
    )
    assert response.status_code == 200


def test_class_subjects_include_teacher_name(client, admin_headers):
    client.post(
        "/class-subjects", json={"class_id": "C001", "subject_id": "SUB001", "teacher_id": "T001"}, headers=admin_headers
    )
    client.post("/class-subjects", json={"class_id": "C001", "subject_id": "SUB003"}, headers=admin_headers)

    subjects = client.get("/classes/C001/subjects", headers=admin_headers).json()["data"]
    assert [(s["subject_id"], s["teacher_name"]) for s in subjects] == [("SUB001", "John Smith"), ("SUB003", None)]

    classes = client.get("/subjects/SUB003/classes", headers=admin_headers).json()["data"]
    assert [c["class_id"] for c in classes] == ["C001"]

    removed = client.request(
        "DELETE", "/class-subjects", json={"class_id": "C001", "subject_id": "SUB003"}, headers=admin_headers
    )
    assert removed.json()["data"]["unassigned"] is True
    assert len(client.get("/classes/C001/subjects", headers=admin_headers).json()["data"]) == 1


def test_teacher_cannot_assign_students(client, teacher_headers):
    response = client.post("/student-classes", json={"student_id": "S001", "class_id": "C001"}, headers=teacher_headers)
    assert response.status_code == 403
