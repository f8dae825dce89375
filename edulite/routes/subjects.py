from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from ..audit import log_audit
from ..database import get_db_session
from ..middleware import STAFF, require_roles
from ..models import Subject, UserRole
from ..schemas import ApiResponse, SubjectCreate, SubjectOut, SubjectUpdate
from ..services import create_subject, delete_subject, get_or_404, list_rows, update_subject
from .common import PageParams

router = APIRouter(prefix="/subjects", tags=["Subjects"])

admin_only = [Depends(require_roles(UserRole.ADMIN))]


@router.get("", response_model=ApiResponse[list[SubjectOut]], dependencies=[Depends(require_roles(*STAFF))])
def list_subjects(params: PageParams = Depends(), db: Session = Depends(get_db_session)):
    subjects = list_rows(db, Subject, "subjects", page=params.page, page_size=params.page_size, search=params.search)
    return ApiResponse(data=[SubjectOut.model_validate(s) for s in subjects])


@router.get("/{subject_id}", response_model=ApiResponse[SubjectOut], dependencies=[Depends(require_roles(*STAFF))])
def get_subject(subject_id: str, db: Session = Depends(get_db_session)):
    return ApiResponse(data=SubjectOut.model_validate(get_or_404(db, Subject, subject_id, "Subject")))


@router.post("", response_model=ApiResponse[SubjectOut], status_code=status.HTTP_201_CREATED, dependencies=admin_only)
def add_subject(payload: SubjectCreate, background_tasks: BackgroundTasks, db: Session = Depends(get_db_session)):
    subject = SubjectOut.model_validate(create_subject(db, payload=payload.model_dump()))
    log_audit(background_tasks, "subject_create", subject.model_dump())
    return ApiResponse(data=subject)


@router.put("/{subject_id}", response_model=ApiResponse[SubjectOut], dependencies=admin_only)
def edit_subject(
    subject_id: str,
    payload: SubjectUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
):
    changes = payload.model_dump(exclude_unset=True)
    subject = SubjectOut.model_validate(update_subject(db, subject_id=subject_id, changes=changes))
    log_audit(background_tasks, "subject_update", subject.model_dump())
    return ApiResponse(data=subject)


@router.delete("/{subject_id}", response_model=ApiResponse[SubjectOut], dependencies=admin_only)
def remove_subject(subject_id: str, background_tasks: BackgroundTasks, db: Session = Depends(get_db_session)):
    removed = delete_subject(db, subject_id=subject_id)
    log_audit(background_tasks, "subject_delete", {"subject_id": subject_id})
    return ApiResponse(data=SubjectOut.model_validate(removed))
