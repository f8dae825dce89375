def test_create_and_fetch_teacher(client, admin_headers, teacher_headers):
    response = client.post(
        "/teachers",
        json={"full_name": "Grace Hopper", "email": "grace@school.edu", "subject": "Computing", "phone": "555-0199"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    teacher_id = response.json()["data"]["teacher_id"]

    fetched = client.get(f"/teachers/{teacher_id}", headers=teacher_headers)
    assert fetched.status_code == 200
    assert fetched.json()["data"]["subject"] == "Computing"


def test_teacher_list_is_sorted_by_name(client, admin_headers):
    names = [t["full_name"] for t in client.get("/teachers", headers=admin_headers).json()["data"]]
    assert names == ["John Smith", "Michael Brown", "Sarah Johnson"]


def test_teacher_short_name_is_400(client, admin_headers):
    response = client.post("/teachers", json={"full_name": "G", "email": "g@school.edu"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"].startswith("full_name:")


def test_update_teacher_email_conflict(client, admin_headers):
    response = client.put("/teachers/T001", json={"email": "sarah.johnson@school.edu"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Email already in use"


def test_update_missing_teacher_is_404(client, admin_headers):
    response = client.put("/teachers/T999", json={"subject": "Art"}, headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "Teacher not found"


def test_soft_delete_teacher(client, admin_headers):
    assert client.delete("/teachers/T003", headers=admin_headers).json()["data"]["active"] is False

    ids = {t["teacher_id"] for t in client.get("/teachers", headers=admin_headers).json()["data"]}
    assert "T003" not in ids


def test_teacher_cannot_delete_teacher(client, teacher_headers):
    assert client.delete("/teachers/T001", headers=teacher_headers).status_code == 403
