from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from .models import (
    Attendance,
    ClassAnnouncement,
    ClassMaterial,
    Homework,
    HomeworkSubmission,
    SchoolClass,
    Student,
    StudentClass,
    StudentNote,
    StudentPerformance,
)
from .services import apply_changes, as_dict, commit_or_400, get_or_404, list_rows, new_id, now_iso


# --- homework ---


def list_homework(db: Session, *, page: int, page_size: int, search: str = "", teacher_id: str = "") -> list[Homework]:
    filters = (Homework.teacher_id == teacher_id,) if teacher_id else ()
    return list_rows(db, Homework, "homework", page=page, page_size=page_size, search=search, filters=filters)


def create_homework(db: Session, *, payload: dict[str, Any]) -> Homework:
    homework = Homework(
        homework_id=payload.get("homework_id") or new_id(),
        title=payload["title"],
        description=payload.get("description") or "",
        due_date=payload["due_date"],
        created_at=payload.get("created_at") or now_iso(),
        status=payload.get("status") or "pending",
        teacher_id=payload["teacher_id"],
        class_id=payload.get("class_id") or None,
        subject_id=payload.get("subject_id") or None,
    )
    db.add(homework)
    commit_or_400(db, "Failed to add homework")
    return homework


def update_homework(db: Session, *, homework_id: str, changes: dict[str, Any]) -> Homework:
    homework = get_or_404(db, Homework, homework_id, "Homework")
    apply_changes(homework, changes)
    commit_or_400(db, "Failed to update homework")
    return homework


def delete_homework(db: Session, *, homework_id: str) -> dict[str, Any]:
    homework = get_or_404(db, Homework, homework_id, "Homework")
    snapshot = as_dict(homework)
    db.delete(homework)
    commit_or_400(db, "Failed to delete homework")
    return snapshot


def list_submissions(db: Session, *, homework_id: str) -> list[HomeworkSubmission]:
    return (
        db.query(HomeworkSubmission)
        .filter(HomeworkSubmission.homework_id == homework_id)
        .order_by(HomeworkSubmission.submitted_at)
        .all()
    )


def submit_homework(db: Session, *, homework_id: str, payload: dict[str, Any]) -> HomeworkSubmission:
    get_or_404(db, Homework, homework_id, "Homework")
    submission = HomeworkSubmission(
        submission_id=payload.get("submission_id") or new_id(),
        homework_id=homework_id,
        student_id=payload["student_id"],
        submitted_at=payload.get("submitted_at") or now_iso(),
        content=payload.get("content") or "",
        status=payload.get("status") or "submitted",
    )
    db.add(submission)
    commit_or_400(db, "Failed to submit homework")
    return submission


def grade_submission(
    db: Session, *, submission_id: str, grade: str | None, feedback: str | None, graded_by: str
) -> HomeworkSubmission:
    submission = get_or_404(db, HomeworkSubmission, submission_id, "Submission")
    submission.grade = grade or None
    submission.feedback = feedback or None
    submission.status = "graded"
    submission.graded_at = now_iso()
    submission.graded_by = graded_by
    commit_or_400(db, "Failed to grade submission")
    return submission


def teacher_dashboard(db: Session, *, teacher_id: str) -> dict[str, int]:
    classes = db.query(func.count(SchoolClass.class_id)).filter(SchoolClass.teacher_id == teacher_id).scalar()
    homework = db.query(func.count(Homework.homework_id)).filter(Homework.teacher_id == teacher_id).scalar()
    pending = (
        db.query(func.count(HomeworkSubmission.submission_id))
        .join(Homework, Homework.homework_id == HomeworkSubmission.homework_id)
        .filter(Homework.teacher_id == teacher_id, HomeworkSubmission.status == "submitted")
        .scalar()
    )
    students = (
        db.query(func.count(func.distinct(StudentClass.student_id)))
        .join(SchoolClass, SchoolClass.class_id == StudentClass.class_id)
        .filter(SchoolClass.teacher_id == teacher_id)
        .scalar()
    )
    return {
        "classes": classes or 0,
        "homework": homework or 0,
        "pending_submissions": pending or 0,
        "total_students": students or 0,
    }


# --- attendance, materials, announcements ---


def list_attendance(db: Session, *, class_id: str, date: str | None = None) -> list[dict[str, Any]]:
    query = (
        db.query(Attendance, Student.full_name)
        .join(Student, Student.student_id == Attendance.student_id)
        .filter(Attendance.class_id == class_id)
    )
    if date:
        query = query.filter(Attendance.date == date)
    rows = query.order_by(Attendance.date, Student.full_name).all()
    return [{**as_dict(record), "student_name": student_name} for record, student_name in rows]


def record_attendance(db: Session, *, class_id: str, payload: dict[str, Any]) -> Attendance:
    attendance = Attendance(
        attendance_id=payload.get("attendance_id") or new_id(),
        class_id=class_id,
        student_id=payload["student_id"],
        date=payload["date"],
        status=payload["status"],
        notes=payload.get("notes") or "",
    )
    db.add(attendance)
    commit_or_400(db, "Failed to mark attendance")
    return attendance


def list_materials(db: Session, *, class_id: str) -> list[ClassMaterial]:
    return (
        db.query(ClassMaterial)
        .filter(ClassMaterial.class_id == class_id)
        .order_by(ClassMaterial.uploaded_at.desc())
        .all()
    )


def add_material(db: Session, *, class_id: str, payload: dict[str, Any]) -> ClassMaterial:
    material = ClassMaterial(
        material_id=payload.get("material_id") or new_id(),
        class_id=class_id,
        title=payload["title"],
        description=payload.get("description") or "",
        file_type=payload.get("file_type") or "",
        file_url=payload.get("file_url") or "",
        file_size=payload.get("file_size") or "",
        uploaded_at=payload.get("uploaded_at") or now_iso(),
        uploaded_by=payload["uploaded_by"],
    )
    db.add(material)
    commit_or_400(db, "Failed to add class material")
    return material


def list_announcements(db: Session, *, class_id: str) -> list[ClassAnnouncement]:
    return (
        db.query(ClassAnnouncement)
        .filter(ClassAnnouncement.class_id == class_id, ClassAnnouncement.is_active.is_(True))
        .order_by(ClassAnnouncement.created_at.desc())
        .all()
    )


def add_announcement(db: Session, *, class_id: str, payload: dict[str, Any]) -> ClassAnnouncement:
    announcement = ClassAnnouncement(
        announcement_id=payload.get("announcement_id") or new_id(),
        class_id=class_id,
        title=payload["title"],
        content=payload["content"],
        created_at=payload.get("created_at") or now_iso(),
        created_by=payload["created_by"],
        priority=payload.get("priority") or "medium",
        is_active=payload.get("is_active", True),
    )
    db.add(announcement)
    commit_or_400(db, "Failed to add class announcement")
    return announcement


# --- student notes & performance ---


def list_notes(db: Session, *, student_id: str) -> list[StudentNote]:
    return (
        db.query(StudentNote)
        .filter(StudentNote.student_id == student_id)
        .order_by(StudentNote.created_at.desc())
        .all()
    )


def add_note(db: Session, *, student_id: str, payload: dict[str, Any]) -> StudentNote:
    note = StudentNote(
        note_id=payload.get("note_id") or new_id(),
        student_id=student_id,
        teacher_id=payload["teacher_id"],
        note_type=payload["note_type"],
        title=payload["title"],
        content=payload["content"],
        created_at=payload.get("created_at") or now_iso(),
        is_private=bool(payload.get("is_private")),
        tags=payload.get("tags") or "",
    )
    db.add(note)
    commit_or_400(db, "Failed to add student note")
    return note


def list_performance(db: Session, *, student_id: str, class_id: str | None = None) -> list[StudentPerformance]:
    query = db.query(StudentPerformance).filter(StudentPerformance.student_id == student_id)
    if class_id:
        query = query.filter(StudentPerformance.class_id == class_id)
    return query.order_by(StudentPerformance.semester, StudentPerformance.performance_id).all()


def add_performance(db: Session, *, student_id: str, payload: dict[str, Any]) -> StudentPerformance:
    performance = StudentPerformance(
        performance_id=payload.get("performance_id") or new_id(),
        student_id=student_id,
        class_id=payload["class_id"],
        subject_id=payload["subject_id"],
        semester=payload["semester"],
        overall_grade=payload.get("overall_grade") or "",
        gpa=payload.get("gpa"),
        attendance_rate=payload.get("attendance_rate"),
        homework_completion_rate=payload.get("homework_completion_rate"),
        participation_score=payload.get("participation_score"),
        last_updated=payload.get("last_updated") or now_iso(),
    )
    db.add(performance)
    commit_or_400(db, "Failed to add student performance")
    return performance
