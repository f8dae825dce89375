from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from ..audit import log_audit
from ..database import get_db_session
from ..middleware import STAFF, require_roles
from ..models import Teacher, UserRole
from ..schemas import ApiResponse, TeacherCreate, TeacherOut, TeacherUpdate
from ..services import create_teacher, deactivate_teacher, get_or_404, list_rows, update_teacher
from .common import PageParams

router = APIRouter(prefix="/teachers", tags=["Teachers"])


@router.get("", response_model=ApiResponse[list[TeacherOut]], dependencies=[Depends(require_roles(*STAFF))])
def list_teachers(
    params: PageParams = Depends(),
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db_session),
):
    teachers = list_rows(
        db,
        Teacher,
        "teachers",
        page=params.page,
        page_size=params.page_size,
        search=params.search,
        include_inactive=include_inactive,
    )
    return ApiResponse(data=[TeacherOut.model_validate(t) for t in teachers])


@router.get("/{teacher_id}", response_model=ApiResponse[TeacherOut], dependencies=[Depends(require_roles(*STAFF))])
def get_teacher(teacher_id: str, db: Session = Depends(get_db_session)):
    return ApiResponse(data=TeacherOut.model_validate(get_or_404(db, Teacher, teacher_id, "Teacher")))


@router.post(
    "",
    response_model=ApiResponse[TeacherOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
def add_teacher(payload: TeacherCreate, background_tasks: BackgroundTasks, db: Session = Depends(get_db_session)):
    teacher = TeacherOut.model_validate(create_teacher(db, payload=payload.model_dump()))
    log_audit(background_tasks, "teacher_create", teacher.model_dump())
    return ApiResponse(data=teacher)


@router.put(
    "/{teacher_id}",
    response_model=ApiResponse[TeacherOut],
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
def edit_teacher(
    teacher_id: str,
    payload: TeacherUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
):
    changes = payload.model_dump(exclude_unset=True)
    teacher = TeacherOut.model_validate(update_teacher(db, teacher_id=teacher_id, changes=changes))
    log_audit(background_tasks, "teacher_update", teacher.model_dump())
    return ApiResponse(data=teacher)


@router.delete(
    "/{teacher_id}",
    response_model=ApiResponse[TeacherOut],
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
def remove_teacher(teacher_id: str, background_tasks: BackgroundTasks, db: Session = Depends(get_db_session)):
    teacher = TeacherOut.model_validate(deactivate_teacher(db, teacher_id=teacher_id))
    log_audit(background_tasks, "teacher_delete", {"teacher_id": teacher_id})
    return ApiResponse(data=teacher)
