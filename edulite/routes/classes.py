from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from ..audit import log_audit
from ..database import get_db_session
from ..middleware import STAFF, require_roles
from ..models import SchoolClass, UserRole
from ..schemas import ApiResponse, ClassCreate, ClassOut, ClassUpdate
from ..services import create_class, delete_class, get_or_404, list_rows, update_class
from .common import PageParams

router = APIRouter(prefix="/classes", tags=["Classes"])

admin_only = [Depends(require_roles(UserRole.ADMIN))]


@router.get("", response_model=ApiResponse[list[ClassOut]], dependencies=[Depends(require_roles(*STAFF))])
def list_classes(params: PageParams = Depends(), db: Session = Depends(get_db_session)):
    classes = list_rows(db, SchoolClass, "classes", page=params.page, page_size=params.page_size, search=params.search)
    return ApiResponse(data=[ClassOut.model_validate(c) for c in classes])


@router.get("/{class_id}", response_model=ApiResponse[ClassOut], dependencies=[Depends(require_roles(*STAFF))])
def get_class(class_id: str, db: Session = Depends(get_db_session)):
    return ApiResponse(data=ClassOut.model_validate(get_or_404(db, SchoolClass, class_id, "Class")))


@router.post("", response_model=ApiResponse[ClassOut], status_code=status.HTTP_201_CREATED, dependencies=admin_only)
def add_class(payload: ClassCreate, background_tasks: BackgroundTasks, db: Session = Depends(get_db_session)):
    school_class = ClassOut.model_validate(create_class(db, payload=payload.model_dump()))
    log_audit(background_tasks, "class_create", school_class.model_dump())
    return ApiResponse(data=school_class)


@router.put("/{class_id}", response_model=ApiResponse[ClassOut], dependencies=admin_only)
def edit_class(
    class_id: str,
    payload: ClassUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
):
    changes = payload.model_dump(exclude_unset=True)
    school_class = ClassOut.model_validate(update_class(db, class_id=class_id, changes=changes))
    log_audit(background_tasks, "class_update", school_class.model_dump())
    return ApiResponse(data=school_class)


@router.delete("/{class_id}", response_model=ApiResponse[ClassOut], dependencies=admin_only)
def remove_class(class_id: str, background_tasks: BackgroundTasks, db: Session = Depends(get_db_session)):
    removed = delete_class(db, class_id=class_id)
    log_audit(background_tasks, "class_delete", {"class_id": class_id})
    return ApiResponse(data=ClassOut.model_validate(removed))
