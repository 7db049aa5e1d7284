# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Auth endpoints – registration, login, password change, settings, current-user
info and temporary login tokens.

The business rules live in :mod:`auth.service`; handlers only translate
between HTTP and the service results and mint the JWT.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from core.config import settings
from core.errors import raise_for_result
from core.security import create_access_token, get_current_user
from models.user import User
from auth import service
from auth.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    TempTokenLoginRequest,
    TempTokenResponse,
    UserInfoResponse,
)

router = APIRouter(prefix="/auth", tags=["auth"])

# Failed logins are 401, not the 403 used for locked resources
_UNAUTHORIZED = {"invalid_credential": status.HTTP_401_UNAUTHORIZED}


def _login_response(user: dict) -> LoginResponse:
    token = create_access_token(user["username"], user["id"])
    return LoginResponse(access_token=token, token_type="bearer", user=user)


# ---------------------------------------------------------------------------
# POST /auth/register
# ---------------------------------------------------------------------------


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account.  Duplicate username or e-mail is a 409."""
    result = raise_for_result(service.register(db, body.username, body.email, body.password))
    return RegisterResponse(success=True, message=result.message, user=result.user)


# ---------------------------------------------------------------------------
# POST /auth/login
# ---------------------------------------------------------------------------


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Authenticate with username or e-mail and return a signed JWT."""
    result = raise_for_result(
        service.login(db, body.identifier, body.password), _UNAUTHORIZED
    )
    return _login_response(result.user)


# ---------------------------------------------------------------------------
# PUT /auth/change-password
# ---------------------------------------------------------------------------


@router.put("/change-password")
def change_password(
    body: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Change the authenticated user's login password."""
    result = raise_for_result(
        service.change_password(db, current_user.id, body.current_password, body.new_password),
        {"invalid_credential": status.HTTP_400_BAD_REQUEST},
    )
    return {"detail": result.message}


# ---------------------------------------------------------------------------
# GET /auth/me  ·  PUT /auth/settings
# ---------------------------------------------------------------------------


@router.get("/me", response_model=UserInfoResponse)
def me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user's public profile (no secrets)."""
    return service.user_view(current_user)


@router.put("/settings", response_model=UserInfoResponse)
def update_settings(
    body: Dict[str, Any],
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Partial update of the user's UI settings."""
    result = raise_for_result(service.update_settings(db, current_user.id, body))
    return result.user


# ---------------------------------------------------------------------------
# POST /auth/temp-token  ·  POST /auth/temp-token/login
# ---------------------------------------------------------------------------


@router.post("/temp-token", response_model=TempTokenResponse)
def create_temp_token(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Issue a single-use token that logs this account in on another device."""
    result = raise_for_result(service.generate_temp_login_token(db, current_user.id))
    return TempTokenResponse(token=result.token, expires_in=settings.temp_token_ttl_seconds)


@router.post("/temp-token/login", response_model=LoginResponse)
def login_with_temp_token(body: TempTokenLoginRequest, db: Session = Depends(get_db)):
    """Exchange a temporary token for a regular session.  Works once."""
    result = service.login_with_temp_token(db, body.token)
    if not result.success:
        # Missing user and bad token look the same from outside
        result.error = "invalid_credential"
        result.message = "Token is invalid or has expired."
    raise_for_result(result, _UNAUTHORIZED)
    return _login_response(result.user)
