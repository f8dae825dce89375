import re
from typing import Annotated, Generic, Literal, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from .models import UserRole
from .resources import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")

T = TypeVar("T")


def _normalize_email(value: str) -> str:
    normalized = value.strip().lower()
    if not EMAIL_PATTERN.match(normalized):
        raise ValueError("must be a valid email")
    return normalized


Email = Annotated[str, Field(max_length=255), AfterValidator(_normalize_email)]


def _not_null(value):
    # Update payloads may omit a required column but never clear it.
    if value is None:
        raise ValueError("must not be null")
    return value


def first_error_message(errors) -> str:
    """Render the first pydantic error as ``"<field>: <message>"``."""
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = loc[-1] if loc else "body"
    return f"{field}: {first.get('msg', 'invalid value')}"


class ApiResponse(BaseModel, Generic[T]):
    status: Literal["success", "error"] = "success"
    data: T | None = None
    error: str | None = None


class PageQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, alias="pageSize")


class Identity(BaseModel):
    username: str
    role: str


# --- auth ---


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=72)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    username: str
    role: UserRole
    active: bool
    parent_id: str | None = None


class LoginData(BaseModel):
    token: str
    token_type: str = "bearer"
    role: UserRole
    user: UserOut


class ForgotPasswordRequest(BaseModel):
    username: str = Field(min_length=1, max_length=255)


class ResetPasswordRequest(BaseModel):
    username: str = Field(min_length=1, max_length=255)
    token: str = Field(min_length=8, max_length=128)
    password: str = Field(min_length=6, max_length=72)


class MessageOut(BaseModel):
    message: str


# --- students ---


class StudentFields(BaseModel):
    date_of_birth: str | None = None
    address: str | None = None
    class_id: str | None = None
    parent1_name: str | None = None
    parent1_email: str | None = None
    parent1_contact: str | None = None
    parent2_name: str | None = None
    parent2_email: str | None = None
    parent2_contact: str | None = None

    @field_validator("parent1_email", "parent2_email")
    @classmethod
    def parent_email_shape(cls, value: str | None) -> str | None:
        if not value:
            return None
        return _normalize_email(value)


class StudentCreate(StudentFields):
    student_id: str | None = Field(default=None, min_length=1, max_length=64)
    full_name: str = Field(min_length=2, max_length=255)
    email: Email
    grade: str = Field(min_length=1, max_length=64)


class StudentUpdate(StudentFields):
    full_name: str | None = Field(default=None, min_length=2, max_length=255)
    email: Email | None = None
    grade: str | None = Field(default=None, min_length=1, max_length=64)
    active: bool | None = None

    reject_null = field_validator("full_name", "email", "grade", "active", mode="before")(_not_null)


class StudentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    student_id: str
    full_name: str
    email: str
    grade: str
    date_of_birth: str | None = None
    address: str | None = None
    class_id: str | None = None
    parent1_name: str | None = None
    parent1_email: str | None = None
    parent1_contact: str | None = None
    parent2_name: str | None = None
    parent2_email: str | None = None
    parent2_contact: str | None = None
    active: bool


# --- teachers ---


class TeacherCreate(BaseModel):
    teacher_id: str | None = Field(default=None, min_length=1, max_length=64)
    full_name: str = Field(min_length=2, max_length=255)
    email: Email
    subject: str | None = None
    phone: str | None = Field(default=None, max_length=64)
    date_of_birth: str | None = None
    address: str | None = None


class TeacherUpdate(BaseModel):
    full_name: str | None = Field(default=None, min_length=2, max_length=255)
    email: Email | None = None
    subject: str | None = None
    phone: str | None = Field(default=None, max_length=64)
    date_of_birth: str | None = None
    address: str | None = None
    active: bool | None = None

    reject_null = field_validator("full_name", "email", "active", mode="before")(_not_null)


class TeacherOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    teacher_id: str
    full_name: str
    email: str
    subject: str | None = None
    phone: str | None = None
    date_of_birth: str | None = None
    address: str | None = None
    active: bool


# --- users ---


class UserCreate(BaseModel):
    user_id: str | None = Field(default=None, min_length=1, max_length=64)
    username: str = Field(min_length=2, max_length=255)
    password: str = Field(min_length=6, max_length=72)
    role: UserRole
    active: bool = True
    parent_id: str | None = None


class UserUpdate(BaseModel):
    username: str | None = Field(default=None, min_length=2, max_length=255)
    password: str | None = Field(default=None, min_length=6, max_length=72)
    role: UserRole | None = None
    active: bool | None = None
    parent_id: str | None = None

    reject_null = field_validator("username", "password", "role", "active", mode="before")(_not_null)


# --- classes & subjects ---


class ClassCreate(BaseModel):
    class_id: str | None = Field(default=None, min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    teacher_id: str | None = None


class ClassUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    teacher_id: str | None = None

    reject_null = field_validator("name", mode="before")(_not_null)


class ClassOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    class_id: str
    name: str
    teacher_id: str | None = None


class SubjectCreate(BaseModel):
    subject_id: str | None = Field(default=None, min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None


class SubjectUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None

    reject_null = field_validator("name", mode="before")(_not_null)


class SubjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    subject_id: str
    name: str
    description: str | None = None


class ClassSubjectOut(SubjectOut):
    teacher_id: str | None = None
    teacher_name: str | None = None


# --- join tables ---


class StudentClassLink(BaseModel):
    student_id: str = Field(min_length=1)
    class_id: str = Field(min_length=1)


class StudentClassOut(StudentClassLink):
    unassigned: bool = False


class ClassSubjectLink(BaseModel):
    class_id: str = Field(min_length=1)
    subject_id: str = Field(min_length=1)
    teacher_id: str | None = None


class ClassSubjectLinkOut(ClassSubjectLink):
    unassigned: bool = False


# --- homework ---

HomeworkStatus = Literal["pending", "active", "closed"]
SubmissionStatus = Literal["submitted", "graded", "late"]


class HomeworkCreate(BaseModel):
    homework_id: str | None = Field(default=None, min_length=1, max_length=64)
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    due_date: str = Field(min_length=1, max_length=32)
    created_at: str | None = None
    status: HomeworkStatus = "pending"
    teacher_id: str = Field(min_length=1)
    class_id: str | None = None
    subject_id: str | None = None


class HomeworkUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    due_date: str | None = Field(default=None, min_length=1, max_length=32)
    status: HomeworkStatus | None = None
    class_id: str | None = None
    subject_id: str | None = None

    reject_null = field_validator("title", "due_date", "status", mode="before")(_not_null)


class HomeworkOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    homework_id: str
    title: str
    description: str | None = None
    due_date: str
    created_at: str
    status: str
    teacher_id: str
    class_id: str | None = None
    subject_id: str | None = None


class SubmissionCreate(BaseModel):
    submission_id: str | None = Field(default=None, min_length=1, max_length=64)
    student_id: str = Field(min_length=1)
    submitted_at: str | None = None
    content: str | None = None
    status: SubmissionStatus = "submitted"


class GradeRequest(BaseModel):
    grade: str | None = Field(default=None, max_length=32)
    feedback: str | None = None


class SubmissionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    submission_id: str
    homework_id: str
    student_id: str
    submitted_at: str
    content: str | None = None
    status: str
    grade: str | None = None
    feedback: str | None = None
    graded_at: str | None = None
    graded_by: str | None = None


class TeacherDashboardOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    classes: int
    homework: int
    pending_submissions: int = Field(alias="pendingSubmissions")
    total_students: int = Field(alias="totalStudents")


# --- class activity ---


class AttendanceCreate(BaseModel):
    attendance_id: str | None = Field(default=None, min_length=1, max_length=64)
    student_id: str = Field(min_length=1)
    date: str = Field(min_length=1, max_length=32)
    status: Literal["present", "absent", "late", "excused"]
    notes: str | None = None


class AttendanceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    attendance_id: str
    class_id: str
    student_id: str
    date: str
    status: str
    notes: str | None = None
    student_name: str | None = None


class MaterialCreate(BaseModel):
    material_id: str | None = Field(default=None, min_length=1, max_length=64)
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    file_type: str | None = None
    file_url: str | None = None
    file_size: str | None = None
    uploaded_at: str | None = None
    uploaded_by: str = Field(min_length=1)


class MaterialOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    material_id: str
    class_id: str
    title: str
    description: str | None = None
    file_type: str | None = None
    file_url: str | None = None
    file_size: str | None = None
    uploaded_at: str
    uploaded_by: str


class AnnouncementCreate(BaseModel):
    announcement_id: str | None = Field(default=None, min_length=1, max_length=64)
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    created_at: str | None = None
    created_by: str = Field(min_length=1)
    priority: Literal["low", "medium", "high"] = "medium"
    is_active: bool = True


class AnnouncementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    announcement_id: str
    class_id: str
    title: str
    content: str
    created_at: str
    created_by: str
    priority: str
    is_active: bool


# --- student records ---


class NoteCreate(BaseModel):
    note_id: str | None = Field(default=None, min_length=1, max_length=64)
    teacher_id: str = Field(min_length=1)
    note_type: Literal["observation", "concern", "improvement", "achievement", "behavior"]
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    created_at: str | None = None
    is_private: bool = False
    tags: str | None = None


class NoteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    note_id: str
    student_id: str
    teacher_id: str
    note_type: str
    title: str
    content: str
    created_at: str
    is_private: bool
    tags: str | None = None


class PerformanceCreate(BaseModel):
    performance_id: str | None = Field(default=None, min_length=1, max_length=64)
    class_id: str = Field(min_length=1)
    subject_id: str = Field(min_length=1)
    semester: str = Field(min_length=1)
    overall_grade: str | None = None
    gpa: float | None = Field(default=None, ge=0, le=4)
    attendance_rate: float | None = Field(default=None, ge=0, le=100)
    homework_completion_rate: float | None = Field(default=None, ge=0, le=100)
    participation_score: float | None = Field(default=None, ge=0, le=100)
    last_updated: str | None = None


class PerformanceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    performance_id: str
    student_id: str
    class_id: str
    subject_id: str
    semester: str
    overall_grade: str | None = None
    gpa: float | None = None
    attendance_rate: float | None = None
    homework_completion_rate: float | None = None
    participation_score: float | None = None
    last_updated: str
