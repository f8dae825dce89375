from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import Session

from edulite.models import Student, User
from edulite.seed import add_missing_columns, init_database


def test_init_database_is_idempotent(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'seed.db'}")
    init_database(engine)
    init_database(engine)

    with Session(bind=engine) as db:
        assert db.query(User).count() == 4
        assert db.query(Student).count() == 3
        assert {u.username for u in db.query(User)} == {"admin", "teacher", "student", "parent"}


def test_add_missing_columns_upgrades_old_tables(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'legacy.db'}")
    with engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE students (student_id VARCHAR(64) PRIMARY KEY, full_name VARCHAR(255), "
                "email VARCHAR(255), grade VARCHAR(64))"
            )
        )
        conn.execute(text("INSERT INTO students VALUES ('S1', 'Old Row', 'old@x.edu', '9')"))

    added = add_missing_columns(engine)

    assert "students.active" in added
    assert "students.parent1_email" in added
    columns = {c["name"] for c in inspect(engine).get_columns("students")}
    assert {"active", "address", "class_id"} <= columns
    with engine.connect() as conn:
        assert conn.execute(text("SELECT active FROM students WHERE student_id = 'S1'")).scalar() == 1


def test_add_missing_columns_is_noop_on_current_schema(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'fresh.db'}")
    init_database(engine)

    assert add_missing_columns(engine) == []
