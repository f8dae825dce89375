from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from ..audit import log_audit
from ..database import get_db_session
from ..middleware import EVERYONE, STAFF, require_roles
from ..models import UserRole
from ..schemas import (
    ApiResponse,
    ClassOut,
    ClassSubjectLink,
    ClassSubjectLinkOut,
    ClassSubjectOut,
    StudentClassLink,
    StudentClassOut,
    StudentOut,
)
from ..services import (
    assign_student_to_class,
    assign_subject_to_class,
    classes_for_student,
    classes_for_subject,
    students_in_class,
    subjects_for_class,
    unassign_student_from_class,
    unassign_subject_from_class,
)

router = APIRouter(tags=["Enrollments"])

admin_only = [Depends(require_roles(UserRole.ADMIN))]
staff = [Depends(require_roles(*STAFF))]


@router.post(
    "/student-classes",
    response_model=ApiResponse[StudentClassOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=admin_only,
)
def assign_student(payload: StudentClassLink, background_tasks: BackgroundTasks, db: Session = Depends(get_db_session)):
    assign_student_to_class(db, student_id=payload.student_id, class_id=payload.class_id)
    log_audit(background_tasks, "student_class_assign", payload.model_dump())
    return ApiResponse(data=StudentClassOut(**payload.model_dump()))


@router.delete("/student-classes", response_model=ApiResponse[StudentClassOut], dependencies=admin_only)
def unassign_student(
    payload: StudentClassLink,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
):
    # Removing a link that does not exist is still a success.
    unassign_student_from_class(db, student_id=payload.student_id, class_id=payload.class_id)
    log_audit(background_tasks, "student_class_unassign", payload.model_dump())
    return ApiResponse(data=StudentClassOut(**payload.model_dump(), unassigned=True))


@router.get("/classes/{class_id}/students", response_model=ApiResponse[list[StudentOut]], dependencies=staff)
def get_class_students(class_id: str, db: Session = Depends(get_db_session)):
    return ApiResponse(data=[StudentOut.model_validate(s) for s in students_in_class(db, class_id=class_id)])


@router.get(
    "/students/{student_id}/classes",
    response_model=ApiResponse[list[ClassOut]],
    dependencies=[Depends(require_roles(*EVERYONE))],
)
def get_student_classes(student_id: str, db: Session = Depends(get_db_session)):
    return ApiResponse(data=[ClassOut.model_validate(c) for c in classes_for_student(db, student_id=student_id)])


@router.post(
    "/class-subjects",
    response_model=ApiResponse[ClassSubjectLinkOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=admin_only,
)
def assign_subject(payload: ClassSubjectLink, background_tasks: BackgroundTasks, db: Session = Depends(get_db_session)):
    assign_subject_to_class(
        db, class_id=payload.class_id, subject_id=payload.subject_id, teacher_id=payload.teacher_id
    )
    log_audit(background_tasks, "class_subject_assign", payload.model_dump())
    return ApiResponse(data=ClassSubjectLinkOut(**payload.model_dump()))


@router.delete("/class-subjects", response_model=ApiResponse[ClassSubjectLinkOut], dependencies=admin_only)
def unassign_subject(
    payload: ClassSubjectLink,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
):
    unassign_subject_from_class(db, class_id=payload.class_id, subject_id=payload.subject_id)
    log_audit(background_tasks, "class_subject_unassign", payload.model_dump())
    return ApiResponse(data=ClassSubjectLinkOut(**payload.model_dump(), unassigned=True))


@router.get("/classes/{class_id}/subjects", response_model=ApiResponse[list[ClassSubjectOut]], dependencies=staff)
def get_class_subjects(class_id: str, db: Session = Depends(get_db_session)):
    return ApiResponse(data=[ClassSubjectOut(**row) for row in subjects_for_class(db, class_id=class_id)])


@router.get("/subjects/{subject_id}/classes", response_model=ApiResponse[list[ClassOut]], dependencies=staff)
def get_subject_classes(subject_id: str, db: Session = Depends(get_db_session)):
    return ApiResponse(data=[ClassOut.model_validate(c) for c in classes_for_subject(db, subject_id=subject_id)])
