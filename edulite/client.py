"""Data access for front ends: the live REST API or the bundled fixtures.

Callers get a :class:`DataSource` from :func:`get_data_source` once and never
branch on mock mode themselves. Both adapters answer with the same
``{"status", "data", "error"}`` envelope the API sends.
"""
import copy
import json
import logging
import uuid
from abc import ABC, abstractmethod
from importlib.resources import files
from typing import Any

import requests
from pydantic import ValidationError

from .config import settings
from .resources import DEFAULT_PAGE_SIZE, FIXTURE_ONLY_RESOURCES, ID_FIELDS, SOFT_DELETE_RESOURCES, select_page
from .schemas import (
    ClassCreate,
    ClassUpdate,
    HomeworkCreate,
    HomeworkUpdate,
    PageQuery,
    StudentCreate,
    StudentUpdate,
    SubjectCreate,
    SubjectUpdate,
    TeacherCreate,
    TeacherUpdate,
    UserCreate,
    UserUpdate,
    first_error_message,
)

logger = logging.getLogger(__name__)

LABELS = {
    "students": "Student",
    "teachers": "Teacher",
    "classes": "Class",
    "subjects": "Subject",
    "users": "User",
    "homework": "Homework",
    "parents": "Parent",
}

REQUEST_TIMEOUT = 10

# Parents have no API counterpart and are stored as given.
CREATE_SCHEMAS = {
    "students": StudentCreate,
    "teachers": TeacherCreate,
    "classes": ClassCreate,
    "subjects": SubjectCreate,
    "users": UserCreate,
    "homework": HomeworkCreate,
}
UPDATE_SCHEMAS = {
    "students": StudentUpdate,
    "teachers": TeacherUpdate,
    "classes": ClassUpdate,
    "subjects": SubjectUpdate,
    "users": UserUpdate,
    "homework": HomeworkUpdate,
}


def ok(data: Any) -> dict[str, Any]:
    return {"status": "success", "data": data, "error": None}


def fail(error: str) -> dict[str, Any]:
    return {"status": "error", "data": None, "error": error}


class DataSource(ABC):
    @abstractmethod
    def login(self, username: str, password: str) -> dict[str, Any]: ...

    @abstractmethod
    def list(
        self,
        resource: str,
        *,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        search: str = "",
        include_inactive: bool = False,
    ) -> dict[str, Any]: ...

    @abstractmethod
    def get(self, resource: str, record_id: str) -> dict[str, Any]: ...

    @abstractmethod
    def create(self, resource: str, payload: dict[str, Any]) -> dict[str, Any]: ...

    @abstractmethod
    def update(self, resource: str, record_id: str, changes: dict[str, Any]) -> dict[str, Any]: ...

    @abstractmethod
    def delete(self, resource: str, record_id: str) -> dict[str, Any]: ...


class LiveDataSource(DataSource):
    """Talks to the REST API and keeps the bearer token from the last login.

    ``session`` only needs ``request()`` returning objects with
    ``status_code`` and ``json()``, so a ``requests.Session`` or a test client
    both work.
    """

    def __init__(self, base_url: str | None = None, session=None):
        self.base_url = (base_url if base_url is not None else settings.api_url).rstrip("/")
        self.session = session or requests.Session()
        self.token: str | None = None

    def _call(self, method: str, path: str, *, params=None, body=None) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        try:
            response = self.session.request(
                method,
                f"{self.base_url}{path}",
                params=params,
                json=body,
                headers=headers,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.error(f"API request failed: {method} {path}: {e}")
            return fail(f"Network error: {e}")
        return self._normalize(response)

    @staticmethod
    def _normalize(response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("status") in ("success", "error"):
            return {"status": body["status"], "data": body.get("data"), "error": body.get("error")}
        if 200 <= response.status_code < 300:
            return ok(body)
        return fail(f"Request failed with status {response.status_code}")

    def _path(self, resource: str, record_id: str | None = None) -> str | None:
        if resource not in ID_FIELDS or resource in FIXTURE_ONLY_RESOURCES:
            return None
        return f"/{resource}" if record_id is None else f"/{resource}/{record_id}"

    def login(self, username, password):
        result = self._call("POST", "/login", body={"username": username, "password": password})
        if result["status"] == "success":
            self.token = result["data"]["token"]
        return result

    def list(self, resource, *, page=1, page_size=DEFAULT_PAGE_SIZE, search="", include_inactive=False):
        path = self._path(resource)
        if path is None:
            return fail(f"{resource} are not available from the API")
        params = {"page": page, "pageSize": page_size}
        if search:
            params["search"] = search
        if include_inactive:
            params["include_inactive"] = "true"
        return self._call("GET", path, params=params)

    def get(self, resource, record_id):
        path = self._path(resource, record_id)
        if path is None:
            return fail(f"{resource} are not available from the API")
        return self._call("GET", path)

    def create(self, resource, payload):
        path = self._path(resource)
        if path is None:
            return fail(f"{resource} are not available from the API")
        return self._call("POST", path, body=payload)

    def update(self, resource, record_id, changes):
        path = self._path(resource, record_id)
        if path is None:
            return fail(f"{resource} are not available from the API")
        return self._call("PUT", path, body=changes)

    def delete(self, resource, record_id):
        path = self._path(resource, record_id)
        if path is None:
            return fail(f"{resource} are not available from the API")
        return self._call("DELETE", path)


def load_fixtures() -> dict[str, list[dict[str, Any]]]:
    folder = files(__package__) / "fixtures"
    return {name: json.loads((folder / f"{name}.json").read_text(encoding="utf-8")) for name in ID_FIELDS}


def _public(resource: str, record: dict[str, Any]) -> dict[str, Any]:
    record = copy.deepcopy(record)
    if resource == "users":
        record.pop("password", None)
    return record


class FixtureDataSource(DataSource):
    """In-memory copy of the bundled fixtures. Writes last for the object's lifetime."""

    def __init__(self, data: dict[str, list[dict[str, Any]]] | None = None):
        self.data = copy.deepcopy(data) if data is not None else load_fixtures()

    def _find(self, resource: str, record_id: str) -> dict[str, Any] | None:
        id_field = ID_FIELDS[resource]
        return next((r for r in self.data[resource] if r.get(id_field) == record_id), None)

    def _conflict(self, resource: str, record: dict[str, Any], exclude_id: str | None = None) -> str | None:
        id_field = ID_FIELDS[resource]
        others = [r for r in self.data[resource] if r.get(id_field) != exclude_id]
        # Usernames stay reserved after a soft delete, e-mails do not.
        if resource == "users" and record.get("username"):
            if any(r.get("username") == record["username"] for r in others):
                return "Username already exists"
        if resource in ("students", "teachers") and record.get("email"):
            email = str(record["email"]).strip().lower()
            if any(str(r.get("email") or "").lower() == email for r in others if r.get("active", True)):
                return "Email already in use"
        return None

    def login(self, username, password):
        for user in self.data["users"]:
            if user["username"] == username and user.get("password") == password and user.get("active", True):
                return ok(
                    {
                        "token": f"mock-{user['role']}-token",
                        "token_type": "bearer",
                        "role": user["role"],
                        "user": _public("users", user),
                    }
                )
        return fail("Invalid credentials")

    @staticmethod
    def _validate(schema, payload: dict[str, Any], *, partial: bool) -> dict[str, Any]:
        """Apply the API's request model so both adapters accept the same input.

        Raises ``ValidationError``; callers turn it into an error envelope.
        """
        return schema.model_validate(payload).model_dump(mode="json", exclude_unset=partial)

    def list(self, resource, *, page=1, page_size=DEFAULT_PAGE_SIZE, search="", include_inactive=False):
        if resource not in self.data:
            return fail(f"Unknown resource: {resource}")
        try:
            PageQuery.model_validate({"page": page, "pageSize": page_size})
        except ValidationError as e:
            return fail(first_error_message(e.errors()))
        rows = select_page(
            self.data[resource],
            resource,
            page=page,
            page_size=page_size,
            search=search.strip(),
            include_inactive=include_inactive,
        )
        return ok([_public(resource, r) for r in rows])

    def get(self, resource, record_id):
        if resource not in self.data:
            return fail(f"Unknown resource: {resource}")
        record = self._find(resource, record_id)
        if record is None:
            return fail(f"{LABELS[resource]} not found")
        return ok(_public(resource, record))

    def create(self, resource, payload):
        if resource not in self.data:
            return fail(f"Unknown resource: {resource}")
        id_field = ID_FIELDS[resource]
        record = copy.deepcopy(payload)
        if resource in CREATE_SCHEMAS:
            try:
                record = self._validate(CREATE_SCHEMAS[resource], record, partial=False)
            except ValidationError as e:
                return fail(first_error_message(e.errors()))
        record[id_field] = record.get(id_field) or uuid.uuid4().hex
        if self._find(resource, record[id_field]) is not None:
            return fail(f"Failed to add {LABELS[resource].lower()}")
        conflict = self._conflict(resource, record)
        if conflict:
            return fail(conflict)
        if resource in SOFT_DELETE_RESOURCES:
            record.setdefault("active", True)
        self.data[resource].append(record)
        return ok(_public(resource, record))

    def update(self, resource, record_id, changes):
        if resource not in self.data:
            return fail(f"Unknown resource: {resource}")
        record = self._find(resource, record_id)
        if record is None:
            return fail(f"{LABELS[resource]} not found")
        changes = {k: v for k, v in changes.items() if k != ID_FIELDS[resource]}
        if resource in UPDATE_SCHEMAS:
            try:
                changes = self._validate(UPDATE_SCHEMAS[resource], changes, partial=True)
            except ValidationError as e:
                return fail(first_error_message(e.errors()))
        conflict = self._conflict(resource, changes, exclude_id=record_id)
        if conflict:
            return fail(conflict)
        record.update(copy.deepcopy(changes))
        return ok(_public(resource, record))

    def delete(self, resource, record_id):
        if resource not in self.data:
            return fail(f"Unknown resource: {resource}")
        record = self._find(resource, record_id)
        if record is None:
            return fail(f"{LABELS[resource]} not found")
        if resource in SOFT_DELETE_RESOURCES:
            record["active"] = False
        else:
            self.data[resource].remove(record)
        return ok(_public(resource, record))


def get_data_source(use_mock: bool | None = None) -> DataSource:
    if use_mock is None:
        use_mock = settings.use_mock
    if use_mock:
        logger.info("Using bundled fixture data (mock mode)")
        return FixtureDataSource()
    logger.info(f"Using live API at {settings.api_url}")
    return LiveDataSource()
