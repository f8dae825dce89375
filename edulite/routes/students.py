from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from ..audit import log_audit
from ..database import get_db_session
from ..middleware import STAFF, require_roles
from ..models import Student, UserRole
from ..schemas import ApiResponse, StudentCreate, StudentOut, StudentUpdate
from ..services import create_student, deactivate_student, get_or_404, list_rows, update_student
from .common import PageParams

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("", response_model=ApiResponse[list[StudentOut]], dependencies=[Depends(require_roles(*STAFF))])
def list_students(
    params: PageParams = Depends(),
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db_session),
):
    students = list_rows(
        db,
        Student,
        "students",
        page=params.page,
        page_size=params.page_size,
        search=params.search,
        include_inactive=include_inactive,
    )
    return ApiResponse(data=[StudentOut.model_validate(s) for s in students])


@router.get("/{student_id}", response_model=ApiResponse[StudentOut], dependencies=[Depends(require_roles(*STAFF))])
def get_student(student_id: str, db: Session = Depends(get_db_session)):
    return ApiResponse(data=StudentOut.model_validate(get_or_404(db, Student, student_id, "Student")))


@router.post(
    "",
    response_model=ApiResponse[StudentOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
def add_student(payload: StudentCreate, background_tasks: BackgroundTasks, db: Session = Depends(get_db_session)):
    student = StudentOut.model_validate(create_student(db, payload=payload.model_dump()))
    log_audit(background_tasks, "student_create", student.model_dump())
    return ApiResponse(data=student)


@router.put(
    "/{student_id}",
    response_model=ApiResponse[StudentOut],
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
def edit_student(
    student_id: str,
    payload: StudentUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
):
    changes = payload.model_dump(exclude_unset=True)
    student = StudentOut.model_validate(update_student(db, student_id=student_id, changes=changes))
    log_audit(background_tasks, "student_update", student.model_dump())
    return ApiResponse(data=student)


@router.delete(
    "/{student_id}",
    response_model=ApiResponse[StudentOut],
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
def remove_student(student_id: str, background_tasks: BackgroundTasks, db: Session = Depends(get_db_session)):
    student = StudentOut.model_validate(deactivate_student(db, student_id=student_id))
    log_audit(background_tasks, "student_delete", {"student_id": student_id})
    return ApiResponse(data=student)
