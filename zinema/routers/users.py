"""User account and password recovery API endpoints."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from zinema.database import get_db
from zinema.dependencies import CurrentUser, get_auth_service, get_current_user, get_recovery_service
from zinema.rate_limit import limiter
from zinema.schemas.users import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PasswordResetRequest,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    UpdateUserRequest,
    UserProfileResponse,
)
from zinema.services.auth import AuthService
from zinema.services.recovery import RESET_COMPLETED_MESSAGE, RESET_REQUESTED_MESSAGE, RecoveryService

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
@limiter.limit("5/minute")
def register(
    request: Request,
    body: RegisterRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    """Register a new user account."""
    user = auth_service.register(
        db,
        first_name=body.first_name,
        last_name=body.last_name,
        age=body.age,
        email=body.email,
        password=body.password,
        confirm_password=body.confirm_password,
    )
    return RegisterResponse(user_id=user.id)


@router.post("/login", response_model=LoginResponse)
@limiter.limit("10/minute")
def login(
    request: Request,
    body: LoginRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Authenticate and receive a session token valid for two hours."""
    token = auth_service.authenticate(db, body.email, body.password)
    return LoginResponse(token=token)


@router.get("/getUser", response_model=UserProfileResponse)
def get_user(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserProfileResponse:
    """Get the profile of the authenticated user."""
    return UserProfileResponse.model_validate(auth_service.get_profile(db, user.user_id))


@router.put("/updateUser", response_model=MessageResponse)
def update_user(
    body: UpdateUserRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Update profile fields and, optionally, the password."""
    auth_service.update_profile(
        db,
        user.user_id,
        body.profile_changes(),
        password=body.password,
        confirm_password=body.confirm_password,
    )
    return MessageResponse(message="Profile successfully updated")


@router.delete("/deleteUser", response_model=MessageResponse)
def delete_user(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Permanently delete the authenticated user's account."""
    auth_service.delete_account(db, user.user_id)
    return MessageResponse(message="Profile successfully deleted")


@router.post("/request-password-reset", response_model=MessageResponse)
@limiter.limit("3/minute")
def request_password_reset(
    request: Request,
    body: PasswordResetRequest,
    db: Session = Depends(get_db),
    recovery: RecoveryService = Depends(get_recovery_service),
) -> MessageResponse:
    """Email a reset link. The reply never reveals whether the account exists."""
    recovery.request_reset(db, body.email)
    return MessageResponse(message=RESET_REQUESTED_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
@limiter.limit("5/minute")
def reset_password(
    request: Request,
    body: ResetPasswordRequest,
    db: Session = Depends(get_db),
    recovery: RecoveryService = Depends(get_recovery_service),
) -> MessageResponse:
    """Set a new password using a reset token from the recovery email."""
    recovery.reset_password(db, body.token, body.password, body.confirm_password)
    return MessageResponse(message=RESET_COMPLETED_MESSAGE)
