def test_notes(client, teacher_headers):
    response = client.post(
        "/students/S001/notes",
        json={"teacher_id": "T001", "note_type": "achievement", "title": "Great quiz", "content": "Top score"},
        headers=teacher_headers,
    )
    assert response.status_code == 201
    assert response.json()["data"]["is_private"] is False

    notes = client.get("/students/S001/notes", headers=teacher_headers).json()["data"]
    assert [n["title"] for n in notes] == ["Great quiz"]


def test_note_type_is_validated(client, teacher_headers):
    response = client.post(
        "/students/S001/notes",
        json={"teacher_id": "T001", "note_type": "gossip", "title": "x", "content": "y"},
        headers=teacher_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("note_type:")


def test_performance_filtered_by_class(client, teacher_headers):
    for class_id, subject_id in (("C001", "SUB001"), ("C002", "SUB002")):
        response = client.post(
            "/students/S001/performance",
            json={"class_id": class_id, "subject_id": subject_id, "semester": "2024-S1", "gpa": 3.5},
            headers=teacher_headers,
        )
        assert response.status_code == 201

    everything = client.get("/students/S001/performance", headers=teacher_headers).json()["data"]
    only_c002 = client.get(
        "/students/S001/performance", params={"class_id": "C002"}, headers=teacher_headers
    ).json()["data"]

    assert len(everything) == 2
    assert [p["subject_id"] for p in only_c002] == ["SUB002"]


def test_gpa_range_is_enforced(client, teacher_headers):
    response = client.post(
        "/students/S001/performance",
        json={"class_id": "C001", "subject_id": "SUB001", "semester": "2024-S1", "gpa": 5},
        headers=teacher_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("gpa:")
