import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from .config import settings
from .database import Base, engine
from .models import Homework, SchoolClass, Student, Subject, Teacher, User, UserRole
from .security import hash_password

logger = logging.getLogger(__name__)

DEMO_USERS = [
    ("1", "admin", "admin123", UserRole.ADMIN),
    ("2", "teacher", "teacher123", UserRole.TEACHER),
    ("3", "student", "student123", UserRole.STUDENT),
    ("4", "parent", "parent123", UserRole.PARENT),
]

SAMPLE_TEACHERS = [
    {"teacher_id": "T001", "full_name": "John Smith", "email": "john.smith@school.edu", "subject": "Mathematics"},
    {"teacher_id": "T002", "full_name": "Sarah Johnson", "email": "sarah.johnson@school.edu", "subject": "English"},
    {"teacher_id": "T003", "full_name": "Michael Brown", "email": "michael.brown@school.edu", "subject": "Science"},
]

SAMPLE_STUDENTS = [
    {"student_id": "S001", "full_name": "Alice Johnson", "email": "alice.johnson@student.edu", "grade": "10th Grade"},
    {"student_id": "S002", "full_name": "Bob Wilson", "email": "bob.wilson@student.edu", "grade": "10th Grade"},
    {"student_id": "S003", "full_name": "Carol Davis", "email": "carol.davis@student.edu", "grade": "11th Grade"},
]

SAMPLE_CLASSES = [
    {"class_id": "C001", "name": "Advanced Mathematics", "teacher_id": "T001"},
    {"class_id": "C002", "name": "English Literature", "teacher_id": "T002"},
    {"class_id": "C003", "name": "Physics", "teacher_id": "T003"},
]

SAMPLE_SUBJECTS = [
    {"subject_id": "SUB001", "name": "Mathematics", "description": "Advanced mathematical concepts"},
    {"subject_id": "SUB002", "name": "English", "description": "Literature and composition"},
    {"subject_id": "SUB003", "name": "Physics", "description": "Physical sciences"},
]

SAMPLE_HOMEWORK = [
    {
        "homework_id": "HW001",
        "title": "Algebra Practice",
        "description": "Complete problems 1-20 in Chapter 3",
        "due_date": "2024-01-15",
        "created_at": "2024-01-10",
        "status": "active",
        "teacher_id": "T001",
        "class_id": "C001",
        "subject_id": "SUB001",
    },
    {
        "homework_id": "HW002",
        "title": "Essay Writing",
        "description": "Write a 500-word essay on Shakespeare",
        "due_date": "2024-01-20",
        "created_at": "2024-01-12",
        "status": "active",
        "teacher_id": "T002",
        "class_id": "C002",
        "subject_id": "SUB002",
    },
]


def add_missing_columns(bind: Engine) -> list[str]:
    """Bring tables created by older releases up to the current models.

    Only additive changes are made: each mapped column absent from an existing
    table is added as a nullable column, with its scalar default if it has one.
    """
    inspector = inspect(bind)
    added = []
    with bind.begin() as conn:
        for table in Base.metadata.sorted_tables:
            if not inspector.has_table(table.name):
                continue
            existing = {column["name"] for column in inspector.get_columns(table.name)}
            for column in table.columns:
                if column.name in existing or column.primary_key:
                    continue
                ddl = f"ALTER TABLE {table.name} ADD COLUMN {column.name} {column.type.compile(dialect=bind.dialect)}"
                default = column.default.arg if column.default is not None and column.default.is_scalar else None
                if isinstance(default, bool):
                    ddl += f" DEFAULT {int(default)}"
                elif isinstance(default, (int, float)):
                    ddl += f" DEFAULT {default}"
                elif isinstance(default, str):
                    ddl += " DEFAULT '{}'".format(default.replace("'", "''"))
                conn.exec_driver_sql(ddl)
                added.append(f"{table.name}.{column.name}")
                logger.info(f"Added column {table.name}.{column.name}")
    return added


def seed_default_users(db: Session) -> None:
    for user_id, username, password, role in DEMO_USERS:
        exists = db.query(User).filter(User.username == username).first()
        if exists:
            continue
        db.add(
            User(
                user_id=user_id,
                username=username,
                password_hash=hash_password(password),
                role=role,
                active=True,
            )
        )
    db.commit()


def seed_sample_data(db: Session) -> None:
    fixtures = [
        (Teacher, SAMPLE_TEACHERS),
        (Student, SAMPLE_STUDENTS),
        (SchoolClass, SAMPLE_CLASSES),
        (Subject, SAMPLE_SUBJECTS),
        (Homework, SAMPLE_HOMEWORK),
    ]
    for model, rows in fixtures:
        key = model.__mapper__.primary_key[0].name
        for row in rows:
            if db.get(model, row[key]) is None:
                db.add(model(**row))
    db.commit()


def init_database(bind: Engine = engine) -> None:
    Base.metadata.create_all(bind=bind)
    add_missing_columns(bind)
    db = Session(bind=bind)
    try:
        seed_default_users(db)
        if settings.seed_sample_data:
            seed_sample_data(db)
    finally:
        db.close()
