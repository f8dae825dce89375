import os
import tempfile
from pathlib import Path

import pytest

_TMP_DIR = Path(tempfile.mkdtemp(prefix="edulite-tests-"))

# Settings are read at import time, so the environment must be in place first.
os.environ["JWT_SECRET"] = "test-secret"
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'edulite-test.db'}"
os.environ["AUDIT_LOG_PATH"] = str(_TMP_DIR / "audit.log")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["API_RATE_LIMIT"] = "100000"
os.environ["LOGIN_RATE_LIMIT"] = "100000"
os.environ["SEED_SAMPLE_DATA"] = "true"
os.environ["SMTP_EMAIL"] = ""
os.environ["SMTP_PASSWORD"] = ""

from fastapi.testclient import TestClient  # noqa: E402

from edulite import create_app  # noqa: E402
from edulite.database import Base, engine  # noqa: E402

AUDIT_LOG = Path(os.environ["AUDIT_LOG_PATH"])


@pytest.fixture
def app():
    Base.metadata.drop_all(bind=engine)
    if AUDIT_LOG.exists():
        AUDIT_LOG.unlink()
    return create_app()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def login(client, username, password):
    response = client.post("/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


@pytest.fixture
def admin_headers(client):
    return login(client, "admin", "admin123")


@pytest.fixture
def teacher_headers(client):
    return login(client, "teacher", "teacher123")


@pytest.fixture
def student_headers(client):
    return login(client, "student", "student123")


@pytest.fixture
def parent_headers(client):
    return login(client, "parent", "parent123")


@pytest.fixture
def audit_log():
    return AUDIT_LOG


@pytest.fixture
def login_as(client):
    def _login(username, password):
        return login(client, username, password)

    return _login
