"""Per-resource listing rules shared by the API services and the fixture client.

Both the SQL listing in :mod:`edulite.services` and the in-memory listing in
:mod:`edulite.client` read from these tables, so a search typed into mock mode
matches the same records the live API would return.
"""
from typing import Any, Iterable

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

ID_FIELDS = {
    "students": "student_id",
    "teachers": "teacher_id",
    "classes": "class_id",
    "subjects": "subject_id",
    "users": "user_id",
    "homework": "homework_id",
    "parents": "parent_id",
}

SEARCH_FIELDS = {
    "students": ("full_name", "email"),
    "teachers": ("full_name", "email"),
    "classes": ("name",),
    "subjects": ("name",),
    "users": ("username",),
    "homework": ("title", "description"),
    "parents": ("full_name", "email"),
}

SORT_FIELDS = {
    "students": "full_name",
    "teachers": "full_name",
    "classes": "name",
    "subjects": "name",
    "users": "username",
    "homework": "due_date",
    "parents": "full_name",
}

SOFT_DELETE_RESOURCES = frozenset({"students", "teachers", "users"})

# Resources that only exist in the bundled fixtures.
FIXTURE_ONLY_RESOURCES = frozenset({"parents"})


def page_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size


def matches_search(record: dict[str, Any], resource: str, search: str) -> bool:
    """Case-insensitive substring test, the in-memory twin of ``LIKE '%term%'``."""
    if not search:
        return True
    needle = search.lower()
    for field in SEARCH_FIELDS[resource]:
        value = record.get(field)
        if value and needle in str(value).lower():
            return True
    return False


def sort_key(resource: str):
    field = SORT_FIELDS[resource]
    id_field = ID_FIELDS[resource]

    def key(record: dict[str, Any]):
        return (str(record.get(field) or ""), str(record.get(id_field) or ""))

    return key


def select_page(
    records: Iterable[dict[str, Any]],
    resource: str,
    *,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    search: str = "",
    include_inactive: bool = False,
) -> list[dict[str, Any]]:
    rows = [r for r in records if matches_search(r, resource, search)]
    if resource in SOFT_DELETE_RESOURCES and not include_inactive:
        rows = [r for r in rows if r.get("active", True)]
    rows.sort(key=sort_key(resource))
    offset = page_offset(page, page_size)
    return rows[offset : offset + page_size]
