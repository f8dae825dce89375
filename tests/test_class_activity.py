def test_attendance_filtered_by_date(client, teacher_headers):
    for date, status in (("2024-01-15", "present"), ("2024-01-16", "absent")):
        response = client.post(
            "/classes/C001/attendance",
            json={"student_id": "S001", "date": date, "status": status},
            headers=teacher_headers,
        )
        assert response.status_code == 201

    all_days = client.get("/classes/C001/attendance", headers=teacher_headers).json()["data"]
    one_day = client.get("/classes/C001/attendance", params={"date": "2024-01-15"}, headers=teacher_headers).json()[
        "data"
    ]

    assert len(all_days) == 2
    assert len(one_day) == 1
    assert one_day[0]["status"] == "present"
    assert one_day[0]["student_name"] == "Alice Johnson"


def test_attendance_status_is_validated(client, teacher_headers):
    response = client.post(
        "/classes/C001/attendance",
        json={"student_id": "S001", "date": "2024-01-15", "status": "sleeping"},
        headers=teacher_headers,
    )
    assert response.status_code == 400


def test_materials(client, teacher_headers):
    response = client.post(
        "/classes/C001/materials",
        json={"title": "Chapter 3 slides", "file_type": "pdf", "uploaded_by": "T001"},
        headers=teacher_headers,
    )
    assert response.status_code == 201

    materials = client.get("/classes/C001/materials", headers=teacher_headers).json()["data"]
    assert [m["title"] for m in materials] == ["Chapter 3 slides"]
    assert client.get("/classes/C002/materials", headers=teacher_headers).json()["data"] == []


def test_only_active_announcements_are_listed(client, teacher_headers):
    base = {"content": "Bring calculators", "created_by": "T001"}
    client.post("/classes/C001/announcements", json={**base, "title": "Quiz Friday"}, headers=teacher_headers)
    client.post(
        "/classes/C001/announcements",
        json={**base, "title": "Old news", "is_active": False},
        headers=teacher_headers,
    )

    announcements = client.get("/classes/C001/announcements", headers=teacher_headers).json()["data"]
    assert [a["title"] for a in announcements] == ["Quiz Friday"]
    assert announcements[0]["priority"] == "medium"


def test_students_cannot_post_announcements(client, student_headers):
    response = client.post(
        "/classes/C001/announcements",
        json={"title": "Hi", "content": "Hello", "created_by": "S001"},
        headers=student_headers,
    )
    assert response.status_code == 403
