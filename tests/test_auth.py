from edulite.services import RESET_REQUESTED_MESSAGE


def test_admin_login_returns_token_and_role(client):
    response = client.post("/login", json={"username": "admin", "password": "admin123"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["error"] is None
    assert body["data"]["token"]
    assert body["data"]["token_type"] == "bearer"
    assert body["data"]["role"] == "admin"
    assert body["data"]["user"]["username"] == "admin"
    assert "password_hash" not in body["data"]["user"]


def test_wrong_password_is_rejected(client):
    response = client.post("/login", json={"username": "admin", "password": "nope-nope"})

    assert response.status_code == 401
    assert response.json() == {"status": "error", "data": None, "error": "Invalid credentials"}


def test_unknown_user_is_rejected(client):
    response = client.post("/login", json={"username": "ghost", "password": "admin123"})
    assert response.status_code == 401


def test_login_requires_password_field(client):
    response = client.post("/login", json={"username": "admin"})

    assert response.status_code == 400
    assert response.json()["error"] == "password: Field required"


def test_deactivated_user_cannot_log_in(client, admin_headers):
    assert client.delete("/users/3", headers=admin_headers).status_code == 200

    response = client.post("/login", json={"username": "student", "password": "student123"})
    assert response.status_code == 401


def test_me_returns_token_identity(client, teacher_headers):
    response = client.get("/me", headers=teacher_headers)

    assert response.status_code == 200
    assert response.json()["data"] == {"username": "teacher", "role": "teacher"}


def test_forgot_password_does_not_reveal_accounts(client):
    known = client.post("/forgot-password", json={"username": "admin"})
    unknown = client.post("/forgot-password", json={"username": "nobody-here"})

    assert known.status_code == unknown.status_code == 200
    assert known.json()["data"]["message"] == RESET_REQUESTED_MESSAGE
    assert unknown.json()["data"]["message"] == RESET_REQUESTED_MESSAGE
