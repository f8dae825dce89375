from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from ..audit import log_audit
from ..coursework import (
    create_homework,
    delete_homework,
    grade_submission,
    list_homework,
    list_submissions,
    submit_homework,
    teacher_dashboard,
    update_homework,
)
from ..database import get_db_session
from ..middleware import STAFF, require_roles
from ..models import Homework, UserRole
from ..schemas import (
    ApiResponse,
    GradeRequest,
    HomeworkCreate,
    HomeworkOut,
    HomeworkUpdate,
    Identity,
    SubmissionCreate,
    SubmissionOut,
    TeacherDashboardOut,
)
from ..services import get_or_404
from .common import PageParams

router = APIRouter(tags=["Homework"])

staff = [Depends(require_roles(*STAFF))]


@router.get("/homework", response_model=ApiResponse[list[HomeworkOut]], dependencies=staff)
def get_homework_list(
    params: PageParams = Depends(),
    teacher_id: str = Query(""),
    db: Session = Depends(get_db_session),
):
    items = list_homework(
        db, page=params.page, page_size=params.page_size, search=params.search, teacher_id=teacher_id.strip()
    )
    return ApiResponse(data=[HomeworkOut.model_validate(h) for h in items])


@router.get("/homework/{homework_id}", response_model=ApiResponse[HomeworkOut], dependencies=staff)
def get_homework(homework_id: str, db: Session = Depends(get_db_session)):
    return ApiResponse(data=HomeworkOut.model_validate(get_or_404(db, Homework, homework_id, "Homework")))


@router.post(
    "/homework",
    response_model=ApiResponse[HomeworkOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=staff,
)
def add_homework(payload: HomeworkCreate, background_tasks: BackgroundTasks, db: Session = Depends(get_db_session)):
    homework = HomeworkOut.model_validate(create_homework(db, payload=payload.model_dump()))
    log_audit(background_tasks, "homework_create", homework.model_dump())
    return ApiResponse(data=homework)


@router.put("/homework/{homework_id}", response_model=ApiResponse[HomeworkOut], dependencies=staff)
def edit_homework(
    homework_id: str,
    payload: HomeworkUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
):
    changes = payload.model_dump(exclude_unset=True)
    homework = HomeworkOut.model_validate(update_homework(db, homework_id=homework_id, changes=changes))
    log_audit(background_tasks, "homework_update", homework.model_dump())
    return ApiResponse(data=homework)


@router.delete("/homework/{homework_id}", response_model=ApiResponse[HomeworkOut], dependencies=staff)
def remove_homework(homework_id: str, background_tasks: BackgroundTasks, db: Session = Depends(get_db_session)):
    removed = delete_homework(db, homework_id=homework_id)
    log_audit(background_tasks, "homework_delete", {"homework_id": homework_id})
    return ApiResponse(data=HomeworkOut.model_validate(removed))


@router.get(
    "/homework/{homework_id}/submissions",
    response_model=ApiResponse[list[SubmissionOut]],
    dependencies=staff,
)
def get_submissions(homework_id: str, db: Session = Depends(get_db_session)):
    return ApiResponse(data=[SubmissionOut.model_validate(s) for s in list_submissions(db, homework_id=homework_id)])


@router.post(
    "/homework/{homework_id}/submissions",
    response_model=ApiResponse[SubmissionOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(UserRole.STUDENT))],
)
def add_submission(
    homework_id: str,
    payload: SubmissionCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
):
    submission = SubmissionOut.model_validate(submit_homework(db, homework_id=homework_id, payload=payload.model_dump()))
    log_audit(background_tasks, "homework_submit", submission.model_dump())
    return ApiResponse(data=submission)


@router.put("/submissions/{submission_id}/grade", response_model=ApiResponse[SubmissionOut])
def grade(
    submission_id: str,
    payload: GradeRequest,
    background_tasks: BackgroundTasks,
    identity: Identity = Depends(require_roles(*STAFF)),
    db: Session = Depends(get_db_session),
):
    graded = grade_submission(
        db,
        submission_id=submission_id,
        grade=payload.grade,
        feedback=payload.feedback,
        graded_by=identity.username,
    )
    submission = SubmissionOut.model_validate(graded)
    log_audit(background_tasks, "submission_grade", submission.model_dump())
    return ApiResponse(data=submission)


@router.get("/teacher/{teacher_id}/dashboard", response_model=ApiResponse[TeacherDashboardOut], dependencies=staff)
def get_teacher_dashboard(teacher_id: str, db: Session = Depends(get_db_session)):
    return ApiResponse(data=TeacherDashboardOut(**teacher_dashboard(db, teacher_id=teacher_id)))
