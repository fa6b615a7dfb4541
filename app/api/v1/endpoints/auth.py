"""
Authentication endpoints: registration, login, logout and password reset.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.auth import (
    AuthContext,
    SessionManager,
    get_auth_context,
    get_bearer_token,
    get_session_manager,
)
from app.core.database import get_db
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    RegisterRequest,
    UserResponse,
)
from app.schemas.common import MessageResponse
from app.services.activity_service import ActivityAction, ResourceType, log_activity
from app.services.user_hooks import UserHooks, get_user_hooks
from app.services.user_service import (
    InvalidCredentialsError,
    PasswordResetError,
    RegistrationError,
    authenticate,
    confirm_password_reset,
    register_user,
    request_password_reset,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    request: Request,
    manager: SessionManager = Depends(get_session_manager),
    hooks: UserHooks = Depends(get_user_hooks),
    db: Session = Depends(get_db),
):
    """
    Create an account and log it in.

    The welcome email is sent by the user hook after the row is committed.
    """
    try:
        user = register_user(
            db,
            hooks,
            name=payload.name,
            email=payload.email,
            password=payload.password,
            password_confirm=payload.password_confirm,
            email_visibility=payload.email_visibility,
        )
        token = manager.create_session(db, user)
        log_activity(db, user.id, ActivityAction.REGISTER, ResourceType.USER, user.id, request=request)
        return AuthResponse(token=token, user=UserResponse.model_validate(user))
    except RegistrationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error registering user: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create account"
        )


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    request: Request,
    manager: SessionManager = Depends(get_session_manager),
    db: Session = Depends(get_db),
):
    try:
        user = authenticate(db, payload.email, payload.password)
        token = manager.create_session(db, user)
        log_activity(db, user.id, ActivityAction.LOGIN, ResourceType.USER, user.id, request=request)
        return AuthResponse(token=token, user=UserResponse.model_validate(user))
    except InvalidCredentialsError as e:
        logger.warning("Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error during login: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to log in"
        )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    token: str = Depends(get_bearer_token),
    auth: AuthContext = Depends(get_auth_context),
    manager: SessionManager = Depends(get_session_manager),
    db: Session = Depends(get_db),
):
    manager.revoke(db, token)
    log_activity(db, auth.user_id, ActivityAction.LOGOUT, ResourceType.USER, auth.user_id, request=request)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=MeResponse)
async def me(auth: AuthContext = Depends(get_auth_context)):
    """Current user of the bearer session."""
    data = UserResponse.model_validate(auth.user).model_dump()
    return MeResponse(**data, session_id=auth.session_id)


@router.post(
    "/password-reset/request",
    response_model=MessageResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def password_reset_request(
    payload: PasswordResetRequest,
    request: Request,
    hooks: UserHooks = Depends(get_user_hooks),
    db: Session = Depends(get_db),
):
    """
    Issue a reset token and email the link.

    Always answers 202 so the endpoint does not reveal which emails have accounts.
    """
    try:
        user = request_password_reset(db, hooks, payload.email)
        if user:
            log_activity(
                db, user.id, ActivityAction.PASSWORD_RESET_REQUEST, ResourceType.USER, user.id, request=request
            )
    except Exception as e:
        logger.error(f"Error requesting password reset: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to request password reset"
        )
    return MessageResponse(message="If an account exists for this email, a reset link has been sent")


@router.post("/password-reset/confirm", response_model=MessageResponse)
async def password_reset_confirm(
    payload: PasswordResetConfirm,
    request: Request,
    manager: SessionManager = Depends(get_session_manager),
    db: Session = Depends(get_db),
):
    try:
        user = confirm_password_reset(db, payload.token, payload.password, payload.password_confirm)
        revoked = manager.revoke_all(db, user.id)
        logger.info(f"Revoked {revoked} session(s) for user id={user.id} after password reset")
        log_activity(
            db, user.id, ActivityAction.PASSWORD_RESET_CONFIRM, ResourceType.USER, user.id, request=request
        )
        return MessageResponse(message="Password has been reset")
    except PasswordResetError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error confirming password reset: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to reset password"
        )
