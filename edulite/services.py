import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .mailer import MailDispatchError, send_reset_token
from .models import ClassSubject, SchoolClass, Student, StudentClass, Subject, Teacher, User
from .resources import ID_FIELDS, SEARCH_FIELDS, SOFT_DELETE_RESOURCES, SORT_FIELDS, page_offset
from .security import (
    create_access_token,
    generate_reset_token,
    hash_password,
    hash_reset_token,
    reset_token_expiration,
    verify_password,
    verify_reset_token,
)

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = "If the account exists, a reset code has been sent"


def new_id() -> str:
    return uuid.uuid4().hex


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_or_404(db: Session, model, key: Any, label: str):
    obj = db.get(model, key)
    if obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return obj


def commit_or_400(db: Session, failure: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning(f"{failure}: {exc}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=failure) from exc


def list_rows(
    db: Session,
    model,
    resource: str,
    *,
    page: int,
    page_size: int,
    search: str = "",
    include_inactive: bool = False,
    filters: tuple = (),
) -> list:
    query = db.query(model)
    if search:
        like = f"%{search}%"
        query = query.filter(or_(*[getattr(model, field).like(like) for field in SEARCH_FIELDS[resource]]))
    if resource in SOFT_DELETE_RESOURCES and not include_inactive:
        query = query.filter(model.active.is_(True))
    if filters:
        query = query.filter(*filters)
    query = query.order_by(getattr(model, SORT_FIELDS[resource]), getattr(model, ID_FIELDS[resource]))
    return query.offset(page_offset(page, page_size)).limit(page_size).all()


def apply_changes(obj, changes: dict[str, Any]) -> None:
    for field, value in changes.items():
        setattr(obj, field, value)


def as_dict(obj) -> dict[str, Any]:
    return {column.name: getattr(obj, column.name) for column in obj.__table__.columns}


# --- auth ---


def login_user(db: Session, *, username: str, password: str) -> tuple[User, str]:
    user = db.query(User).filter(User.username == username.strip()).first()
    if not user or not user.active or not verify_password(password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return user, create_access_token(username=user.username, role=user.role.value)


def request_password_reset(db: Session, *, username: str) -> bool:
    """Store a fresh reset token for an active user and send it out.

    Unknown or inactive usernames are ignored so callers cannot probe which
    accounts exist.
    """
    user = db.query(User).filter(User.username == username.strip()).first()
    if not user or not user.active:
        return False

    token = generate_reset_token()
    user.reset_token_hash = hash_reset_token(token)
    user.reset_token_expiry = reset_token_expiration()
    commit_or_400(db, "Failed to create reset token")

    try:
        send_reset_token(recipient=user.username, username=user.username, token=token)
    except MailDispatchError as exc:
        logger.error(str(exc))
    return True


def reset_password(db: Session, *, username: str, token: str, new_password: str) -> User:
    user = db.query(User).filter(User.username == username.strip()).first()
    if not user or not verify_reset_token(token, user.reset_token_hash, user.reset_token_expiry):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired reset token")

    user.password_hash = hash_password(new_password)
    user.reset_token_hash = None
    user.reset_token_expiry = None
    commit_or_400(db, "Failed to reset password")
    return user


# --- users ---


def create_user(db: Session, *, payload: dict[str, Any]) -> User:
    username = payload["username"].strip()
    if db.query(User).filter(User.username == username).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")

    user = User(
        user_id=payload.get("user_id") or new_id(),
        username=username,
        password_hash=hash_password(payload["password"]),
        role=payload["role"],
        active=payload.get("active", True),
        parent_id=payload.get("parent_id"),
    )
    db.add(user)
    commit_or_400(db, "Failed to create user")
    return user


def update_user(db: Session, *, user_id: str, changes: dict[str, Any]) -> User:
    user = get_or_404(db, User, user_id, "User")

    if "username" in changes:
        changes["username"] = changes["username"].strip()
        taken = db.query(User).filter(User.username == changes["username"], User.user_id != user_id).first()
        if taken:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")
    password = changes.pop("password", None)
    if password:
        user.password_hash = hash_password(password)

    apply_changes(user, changes)
    commit_or_400(db, "Failed to update user")
    return user


def deactivate_user(db: Session, *, user_id: str) -> User:
    user = get_or_404(db, User, user_id, "User")
    user.active = False
    commit_or_400(db, "Failed to deactivate user")
    return user


# --- students & teachers ---


def _ensure_email_free(db: Session, model, email: str, exclude_id: str | None = None) -> None:
    id_column = getattr(model, model.__mapper__.primary_key[0].name)
    query = db.query(model).filter(model.email == email, model.active.is_(True))
    if exclude_id is not None:
        query = query.filter(id_column != exclude_id)
    if query.first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already in use")


def create_student(db: Session, *, payload: dict[str, Any]) -> Student:
    _ensure_email_free(db, Student, payload["email"])
    student = Student(**payload)
    student.student_id = payload.get("student_id") or new_id()
    student.active = True
    db.add(student)
    commit_or_400(db, "Failed to add student")
    return student


def update_student(db: Session, *, student_id: str, changes: dict[str, Any]) -> Student:
    student = get_or_404(db, Student, student_id, "Student")
    if changes.get("email"):
        _ensure_email_free(db, Student, changes["email"], exclude_id=student_id)
    apply_changes(student, changes)
    commit_or_400(db, "Failed to update student")
    return student


def deactivate_student(db: Session, *, student_id: str) -> Student:
    student = get_or_404(db, Student, student_id, "Student")
    student.active = False
    commit_or_400(db, "Failed to delete student")
    return student


def create_teacher(db: Session, *, payload: dict[str, Any]) -> Teacher:
    _ensure_email_free(db, Teacher, payload["email"])
    teacher = Teacher(**payload)
    teacher.teacher_id = payload.get("teacher_id") or new_id()
    teacher.active = True
    db.add(teacher)
    commit_or_400(db, "Failed to add teacher")
    return teacher


def update_teacher(db: Session, *, teacher_id: str, changes: dict[str, Any]) -> Teacher:
    teacher = get_or_404(db, Teacher, teacher_id, "Teacher")
    if changes.get("email"):
        _ensure_email_free(db, Teacher, changes["email"], exclude_id=teacher_id)
    apply_changes(teacher, changes)
    commit_or_400(db, "Failed to update teacher")
    return teacher


def deactivate_teacher(db: Session, *, teacher_id: str) -> Teacher:
    teacher = get_or_404(db, Teacher, teacher_id, "Teacher")
    teacher.active = False
    commit_or_400(db, "Failed to delete teacher")
    return teacher


# --- classes & subjects ---


def create_class(db: Session, *, payload: dict[str, Any]) -> SchoolClass:
    school_class = SchoolClass(
        class_id=payload.get("class_id") or new_id(),
        name=payload["name"],
        teacher_id=payload.get("teacher_id") or None,
    )
    db.add(school_class)
    commit_or_400(db, "Failed to add class")
    return school_class


def update_class(db: Session, *, class_id: str, changes: dict[str, Any]) -> SchoolClass:
    school_class = get_or_404(db, SchoolClass, class_id, "Class")
    if "teacher_id" in changes:
        changes["teacher_id"] = changes["teacher_id"] or None
    apply_changes(school_class, changes)
    commit_or_400(db, "Failed to update class")
    return school_class


def delete_class(db: Session, *, class_id: str) -> dict[str, Any]:
    school_class = get_or_404(db, SchoolClass, class_id, "Class")
    snapshot = as_dict(school_class)
    db.delete(school_class)
    commit_or_400(db, "Failed to delete class")
    return snapshot


def create_subject(db: Session, *, payload: dict[str, Any]) -> Subject:
    subject = Subject(
        subject_id=payload.get("subject_id") or new_id(),
        name=payload["name"],
        description=payload.get("description") or "",
    )
    db.add(subject)
    commit_or_400(db, "Failed to add subject")
    return subject


def update_subject(db: Session, *, subject_id: str, changes: dict[str, Any]) -> Subject:
    subject = get_or_404(db, Subject, subject_id, "Subject")
    apply_changes(subject, changes)
    commit_or_400(db, "Failed to update subject")
    return subject


def delete_subject(db: Session, *, subject_id: str) -> dict[str, Any]:
    subject = get_or_404(db, Subject, subject_id, "Subject")
    snapshot = as_dict(subject)
    db.delete(subject)
    commit_or_400(db, "Failed to delete subject")
    return snapshot


# --- join tables ---


def assign_student_to_class(db: Session, *, student_id: str, class_id: str) -> StudentClass:
    link = StudentClass(student_id=student_id, class_id=class_id)
    db.add(link)
    commit_or_400(db, "Failed to assign student to class")
    return link


def unassign_student_from_class(db: Session, *, student_id: str, class_id: str) -> int:
    removed = (
        db.query(StudentClass)
        .filter(StudentClass.student_id == student_id, StudentClass.class_id == class_id)
        .delete(synchronize_session=False)
    )
    commit_or_400(db, "Failed to unassign student from class")
    return removed


def students_in_class(db: Session, *, class_id: str) -> list[Student]:
    return (
        db.query(Student)
        .join(StudentClass, StudentClass.student_id == Student.student_id)
        .filter(StudentClass.class_id == class_id)
        .order_by(Student.full_name, Student.student_id)
        .all()
    )


def classes_for_student(db: Session, *, student_id: str) -> list[SchoolClass]:
    return (
        db.query(SchoolClass)
        .join(StudentClass, StudentClass.class_id == SchoolClass.class_id)
        .filter(StudentClass.student_id == student_id)
        .order_by(SchoolClass.name, SchoolClass.class_id)
        .all()
    )


def assign_subject_to_class(db: Session, *, class_id: str, subject_id: str, teacher_id: str | None) -> ClassSubject:
    link = ClassSubject(class_id=class_id, subject_id=subject_id, teacher_id=teacher_id or None)
    db.add(link)
    commit_or_400(db, "Failed to assign subject to class")
    return link


def unassign_subject_from_class(db: Session, *, class_id: str, subject_id: str) -> int:
    removed = (
        db.query(ClassSubject)
        .filter(ClassSubject.class_id == class_id, ClassSubject.subject_id == subject_id)
        .delete(synchronize_session=False)
    )
    commit_or_400(db, "Failed to unassign subject from class")
    return removed


def subjects_for_class(db: Session, *, class_id: str) -> list[dict[str, Any]]:
    rows = (
        db.query(Subject, ClassSubject.teacher_id, Teacher.full_name)
        .join(ClassSubject, ClassSubject.subject_id == Subject.subject_id)
        .outerjoin(Teacher, Teacher.teacher_id == ClassSubject.teacher_id)
        .filter(ClassSubject.class_id == class_id)
        .order_by(Subject.name, Subject.subject_id)
        .all()
    )
    return [
        {
            "subject_id": subject.subject_id,
            "name": subject.name,
            "description": subject.description,
            "teacher_id": teacher_id,
            "teacher_name": teacher_name,
        }
        for subject, teacher_id, teacher_name in rows
    ]


def classes_for_subject(db: Session, *, subject_id: str) -> list[SchoolClass]:
    return (
        db.query(SchoolClass)
        .join(ClassSubject, ClassSubject.class_id == SchoolClass.class_id)
        .filter(ClassSubject.subject_id == subject_id)
        .order_by(SchoolClass.name, SchoolClass.class_id)
        .all()
    )
