from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from ..audit import log_audit
from ..coursework import add_note, add_performance, list_notes, list_performance
from ..database import get_db_session
from ..middleware import STAFF, require_roles
from ..schemas import ApiResponse, NoteCreate, NoteOut, PerformanceCreate, PerformanceOut

router = APIRouter(
    prefix="/students/{student_id}",
    tags=["Student records"],
    dependencies=[Depends(require_roles(*STAFF))],
)


@router.get("/notes", response_model=ApiResponse[list[NoteOut]])
def get_notes(student_id: str, db: Session = Depends(get_db_session)):
    return ApiResponse(data=[NoteOut.model_validate(n) for n in list_notes(db, student_id=student_id)])


@router.post("/notes", response_model=ApiResponse[NoteOut], status_code=status.HTTP_201_CREATED)
def create_note(
    student_id: str,
    payload: NoteCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
):
    note = NoteOut.model_validate(add_note(db, student_id=student_id, payload=payload.model_dump()))
    log_audit(background_tasks, "student_note_create", note.model_dump())
    return ApiResponse(data=note)


@router.get("/performance", response_model=ApiResponse[list[PerformanceOut]])
def get_performance(student_id: str, class_id: str = Query(""), db: Session = Depends(get_db_session)):
    records = list_performance(db, student_id=student_id, class_id=class_id.strip() or None)
    return ApiResponse(data=[PerformanceOut.model_validate(p) for p in records])


@router.post("/performance", response_model=ApiResponse[PerformanceOut], status_code=status.HTTP_201_CREATED)
def create_performance(
    student_id: str,
    payload: PerformanceCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
):
    performance = PerformanceOut.model_validate(
        add_performance(db, student_id=student_id, payload=payload.model_dump())
    )
    log_audit(background_tasks, "student_performance_create", performance.model_dump())
    return ApiResponse(data=performance)
