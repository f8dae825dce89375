from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from ..audit import log_audit
from ..database import get_db_session
from ..middleware import require_roles
from ..models import User, UserRole
from ..schemas import ApiResponse, UserCreate, UserOut, UserUpdate
from ..services import create_user, deactivate_user, get_or_404, list_rows, update_user
from .common import PageParams

router = APIRouter(prefix="/users", tags=["Users"], dependencies=[Depends(require_roles(UserRole.ADMIN))])


@router.get("", response_model=ApiResponse[list[UserOut]])
def list_users(
    params: PageParams = Depends(),
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db_session),
):
    users = list_rows(
        db,
        User,
        "users",
        page=params.page,
        page_size=params.page_size,
        search=params.search,
        include_inactive=include_inactive,
    )
    return ApiResponse(data=[UserOut.model_validate(u) for u in users])


@router.get("/{user_id}", response_model=ApiResponse[UserOut])
def get_user(user_id: str, db: Session = Depends(get_db_session)):
    return ApiResponse(data=UserOut.model_validate(get_or_404(db, User, user_id, "User")))


@router.post("", response_model=ApiResponse[UserOut], status_code=status.HTTP_201_CREATED)
def add_user(payload: UserCreate, background_tasks: BackgroundTasks, db: Session = Depends(get_db_session)):
    user = UserOut.model_validate(create_user(db, payload=payload.model_dump()))
    log_audit(background_tasks, "user_create", user.model_dump(mode="json"))
    return ApiResponse(data=user)


@router.put("/{user_id}", response_model=ApiResponse[UserOut])
def edit_user(
    user_id: str,
    payload: UserUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
):
    user = UserOut.model_validate(update_user(db, user_id=user_id, changes=payload.model_dump(exclude_unset=True)))
    log_audit(background_tasks, "user_update", user.model_dump(mode="json"))
    return ApiResponse(data=user)


@router.delete("/{user_id}", response_model=ApiResponse[UserOut])
def remove_user(user_id: str, background_tasks: BackgroundTasks, db: Session = Depends(get_db_session)):
    user = UserOut.model_validate(deactivate_user(db, user_id=user_id))
    log_audit(background_tasks, "user_delete", {"user_id": user_id})
    return ApiResponse(data=user)
