from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from ..audit import log_audit
from ..coursework import (
    add_announcement,
    add_material,
    list_announcements,
    list_attendance,
    list_materials,
    record_attendance,
)
from ..database import get_db_session
from ..middleware import STAFF, require_roles
from ..schemas import (
    AnnouncementCreate,
    AnnouncementOut,
    ApiResponse,
    AttendanceCreate,
    AttendanceOut,
    MaterialCreate,
    MaterialOut,
)

router = APIRouter(prefix="/classes/{class_id}", tags=["Class activity"], dependencies=[Depends(require_roles(*STAFF))])


@router.get("/attendance", response_model=ApiResponse[list[AttendanceOut]])
def get_attendance(class_id: str, date: str = Query(""), db: Session = Depends(get_db_session)):
    rows = list_attendance(db, class_id=class_id, date=date.strip() or None)
    return ApiResponse(data=[AttendanceOut(**row) for row in rows])


@router.post("/attendance", response_model=ApiResponse[AttendanceOut], status_code=status.HTTP_201_CREATED)
def mark_attendance(
    class_id: str,
    payload: AttendanceCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
):
    attendance = AttendanceOut.model_validate(record_attendance(db, class_id=class_id, payload=payload.model_dump()))
    log_audit(background_tasks, "attendance_mark", attendance.model_dump())
    return ApiResponse(data=attendance)


@router.get("/materials", response_model=ApiResponse[list[MaterialOut]])
def get_materials(class_id: str, db: Session = Depends(get_db_session)):
    return ApiResponse(data=[MaterialOut.model_validate(m) for m in list_materials(db, class_id=class_id)])


@router.post("/materials", response_model=ApiResponse[MaterialOut], status_code=status.HTTP_201_CREATED)
def upload_material(
    class_id: str,
    payload: MaterialCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
):
    material = MaterialOut.model_validate(add_material(db, class_id=class_id, payload=payload.model_dump()))
    log_audit(background_tasks, "material_create", material.model_dump())
    return ApiResponse(data=material)


@router.get("/announcements", response_model=ApiResponse[list[AnnouncementOut]])
def get_announcements(class_id: str, db: Session = Depends(get_db_session)):
    return ApiResponse(data=[AnnouncementOut.model_validate(a) for a in list_announcements(db, class_id=class_id)])


@router.post("/announcements", response_model=ApiResponse[AnnouncementOut], status_code=status.HTTP_201_CREATED)
def post_announcement(
    class_id: str,
    payload: AnnouncementCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
):
    announcement = AnnouncementOut.model_validate(
        add_announcement(db, class_id=class_id, payload=payload.model_dump())
    )
    log_audit(background_tasks, "announcement_create", announcement.model_dump())
    return ApiResponse(data=announcement)
