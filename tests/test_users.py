import pytest


def test_list_users_hides_password_hash(client, admin_headers):
    response = client.get("/users", headers=admin_headers)

    assert response.status_code == 200
    users = response.json()["data"]
    assert [u["username"] for u in users] == ["admin", "parent", "student", "teacher"]
    assert all("password_hash" not in u for u in users)


def test_created_user_can_log_in(client, admin_headers):
    response = client.post(
        "/users",
        json={"username": "newteacher", "password": "secret99", "role": "teacher"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json()["data"]["role"] == "teacher"

    login = client.post("/login", json={"username": "newteacher", "password": "secret99"})
    assert login.status_code == 200
    assert login.json()["data"]["role"] == "teacher"


def test_duplicate_username_is_400(client, admin_headers):
    response = client.post(
        "/users", json={"username": "admin", "password": "secret99", "role": "admin"}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Username already exists"


def test_invalid_role_is_400(client, admin_headers):
    response = client.post(
        "/users", json={"username": "someone", "password": "secret99", "role": "janitor"}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("role:")


def test_short_password_is_400(client, admin_headers):
    response = client.post(
        "/users", json={"username": "someone", "password": "123", "role": "student"}, headers=admin_headers
    )
    assert response.status_code == 400


def test_update_password(client, admin_headers):
    response = client.put("/users/2", json={"password": "changed-pass"}, headers=admin_headers)
    assert response.status_code == 200

    assert client.post("/login", json={"username": "teacher", "password": "changed-pass"}).status_code == 200


def test_rename_to_taken_username_is_400(client, admin_headers):
    response = client.put("/users/2", json={"username": "admin"}, headers=admin_headers)
    assert response.status_code == 400


@pytest.mark.parametrize("field", ["username", "password", "role", "active"])
def test_null_for_required_user_field_is_400(client, admin_headers, field):
    response = client.put("/users/2", json={field: None}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == f"{field}: Value error, must not be null"
    assert client.post("/login", json={"username": "teacher", "password": "teacher123"}).status_code == 200


def test_null_parent_id_clears_link(client, admin_headers):
    client.put("/users/4", json={"parent_id": "P001"}, headers=admin_headers)
    response = client.put("/users/4", json={"parent_id": None}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["data"]["parent_id"] is None


def test_deleted_user_hidden_from_list(client, admin_headers):
    response = client.delete("/users/4", headers=admin_headers)
    assert response.json()["data"]["active"] is False

    usernames = [u["username"] for u in client.get("/users", headers=admin_headers).json()["data"]]
    assert "parent" not in usernames


def test_teacher_cannot_manage_users(client, teacher_headers):
    assert client.get("/users", headers=teacher_headers).status_code == 403
    assert client.get("/users/1", headers=teacher_headers).status_code == 403
