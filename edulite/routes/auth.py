from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session

from ..audit import log_audit, write_audit
from ..database import get_db_session
from ..middleware import get_current_identity, login_rate_limit
from ..schemas import (
    ApiResponse,
    ForgotPasswordRequest,
    Identity,
    LoginData,
    LoginRequest,
    MessageOut,
    ResetPasswordRequest,
    UserOut,
)
from ..services import RESET_REQUESTED_MESSAGE, login_user, request_password_reset, reset_password

router = APIRouter(tags=["Auth"])


@router.post("/login", response_model=ApiResponse[LoginData], dependencies=[Depends(login_rate_limit)])
def login(payload: LoginRequest, background_tasks: BackgroundTasks, db: Session = Depends(get_db_session)):
    try:
        user, token = login_user(db, username=payload.username, password=payload.password)
    except HTTPException:
        write_audit("login_failed", {"username": payload.username})
        raise
    log_audit(background_tasks, "login_success", {"username": user.username})
    return ApiResponse(data=LoginData(token=token, role=user.role, user=UserOut.model_validate(user)))


@router.get("/me", response_model=ApiResponse[Identity])
def me(identity: Identity = Depends(get_current_identity)):
    return ApiResponse(data=identity)


@router.post(
    "/forgot-password",
    response_model=ApiResponse[MessageOut],
    dependencies=[Depends(login_rate_limit)],
)
def forgot_password(
    payload: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
):
    if request_password_reset(db, username=payload.username):
        log_audit(background_tasks, "password_reset_requested", {"username": payload.username})
    return ApiResponse(data=MessageOut(message=RESET_REQUESTED_MESSAGE))


@router.post(
    "/reset-password",
    response_model=ApiResponse[MessageOut],
    dependencies=[Depends(login_rate_limit)],
)
def reset_password_route(
    payload: ResetPasswordRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
):
    user = reset_password(db, username=payload.username, token=payload.token, new_password=payload.password)
    log_audit(background_tasks, "password_reset", {"user_id": user.user_id, "username": user.username})
    return ApiResponse(data=MessageOut(message="Password updated"))
