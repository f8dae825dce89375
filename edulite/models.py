import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"
    PARENT = "parent"


class Student(Base):
    __tablename__ = "students"

    student_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    grade: Mapped[str] = mapped_column(String(64), nullable=False)
    date_of_birth: Mapped[str | None] = mapped_column(String(32), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    class_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    parent1_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    parent1_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    parent1_contact: Mapped[str | None] = mapped_column(String(64), nullable=True)
    parent2_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    parent2_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    parent2_contact: Mapped[str | None] = mapped_column(String(64), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class Teacher(Base):
    __tablename__ = "teachers"

    teacher_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    subject: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    date_of_birth: Mapped[str | None] = mapped_column(String(32), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class User(Base):
    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), nullable=False, index=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    parent_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    reset_token_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    reset_token_expiry: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)


class SchoolClass(Base):
    __tablename__ = "classes"

    class_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    teacher_id: Mapped[str | None] = mapped_column(ForeignKey("teachers.teacher_id"), nullable=True)


class Subject(Base):
    __tablename__ = "subjects"

    subject_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class StudentClass(Base):
    __tablename__ = "student_classes"

    student_id: Mapped[str] = mapped_column(ForeignKey("students.student_id"), primary_key=True)
    class_id: Mapped[str] = mapped_column(ForeignKey("classes.class_id"), primary_key=True)


class ClassSubject(Base):
    __tablename__ = "class_subjects"

    class_id: Mapped[str] = mapped_column(ForeignKey("classes.class_id"), primary_key=True)
    subject_id: Mapped[str] = mapped_column(ForeignKey("subjects.subject_id"), primary_key=True)
    teacher_id: Mapped[str | None] = mapped_column(ForeignKey("teachers.teacher_id"), nullable=True)


class Homework(Base):
    __tablename__ = "homework"

    homework_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    due_date: Mapped[str] = mapped_column(String(32), nullable=False)
    created_at: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(String(16), default="pending", nullable=False)
    teacher_id: Mapped[str] = mapped_column(ForeignKey("teachers.teacher_id"), nullable=False, index=True)
    class_id: Mapped[str | None] = mapped_column(ForeignKey("classes.class_id"), nullable=True)
    subject_id: Mapped[str | None] = mapped_column(ForeignKey("subjects.subject_id"), nullable=True)


class HomeworkSubmission(Base):
    __tablename__ = "homework_submissions"

    submission_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    homework_id: Mapped[str] = mapped_column(ForeignKey("homework.homework_id"), nullable=False, index=True)
    student_id: Mapped[str] = mapped_column(ForeignKey("students.student_id"), nullable=False)
    submitted_at: Mapped[str] = mapped_column(String(32), nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="submitted", nullable=False)
    grade: Mapped[str | None] = mapped_column(String(32), nullable=True)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    graded_at: Mapped[str | None] = mapped_column(String(32), nullable=True)
    graded_by: Mapped[str | None] = mapped_column(String(255), nullable=True)


class Attendance(Base):
    __tablename__ = "attendance"

    attendance_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    class_id: Mapped[str] = mapped_column(ForeignKey("classes.class_id"), nullable=False, index=True)
    student_id: Mapped[str] = mapped_column(ForeignKey("students.student_id"), nullable=False)
    date: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class ClassMaterial(Base):
    __tablename__ = "class_materials"

    material_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    class_id: Mapped[str] = mapped_column(ForeignKey("classes.class_id"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    file_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    file_size: Mapped[str | None] = mapped_column(String(64), nullable=True)
    uploaded_at: Mapped[str] = mapped_column(String(32), nullable=False)
    uploaded_by: Mapped[str] = mapped_column(ForeignKey("teachers.teacher_id"), nullable=False)


class ClassAnnouncement(Base):
    __tablename__ = "class_announcements"

    announcement_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    class_id: Mapped[str] = mapped_column(ForeignKey("classes.class_id"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[str] = mapped_column(String(32), nullable=False)
    created_by: Mapped[str] = mapped_column(ForeignKey("teachers.teacher_id"), nullable=False)
    priority: Mapped[str] = mapped_column(String(16), default="medium", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class StudentNote(Base):
    __tablename__ = "student_notes"

    note_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    student_id: Mapped[str] = mapped_column(ForeignKey("students.student_id"), nullable=False, index=True)
    teacher_id: Mapped[str] = mapped_column(ForeignKey("teachers.teacher_id"), nullable=False)
    note_type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[str] = mapped_column(String(32), nullable=False)
    is_private: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    tags: Mapped[str | None] = mapped_column(String(255), nullable=True)


class StudentPerformance(Base):
    __tablename__ = "student_performance"

    performance_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    student_id: Mapped[str] = mapped_column(ForeignKey("students.student_id"), nullable=False, index=True)
    class_id: Mapped[str] = mapped_column(ForeignKey("classes.class_id"), nullable=False)
    subject_id: Mapped[str] = mapped_column(ForeignKey("subjects.subject_id"), nullable=False)
    semester: Mapped[str] = mapped_column(String(64), nullable=False)
    overall_grade: Mapped[str | None] = mapped_column(String(16), nullable=True)
    gpa: Mapped[float | None] = mapped_column(Float, nullable=True)
    attendance_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    homework_completion_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    participation_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_updated: Mapped[str] = mapped_column(String(32), nullable=False)
