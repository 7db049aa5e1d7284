# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the auth endpoints."""

from typing import Any, Dict, Optional

from pydantic import BaseModel


# -- Requests --------------------------------------------------------------


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    identifier: str  # username or e-mail
    password: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class TempTokenLoginRequest(BaseModel):
    token: str


# -- Responses -------------------------------------------------------------


class UserInfoResponse(BaseModel):
    id: str
    username: str
    settings: Dict[str, Any]


class RegisterResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    user: Optional[UserInfoResponse] = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str  # always "bearer"
    user: UserInfoResponse


class TempTokenResponse(BaseModel):
    token: str
    expires_in: int  # seconds
