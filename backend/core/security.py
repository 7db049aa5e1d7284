# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Central security module.  All cryptographic primitives and auth guards live
here.  No other module should touch raw crypto directly.

Responsibilities
----------------
1. Password hashing / verification          (passlib pbkdf2_sha256)
2. JWT creation / decoding                  (PyJWT / HS256)
3. FastAPI dependency guards                (get_current_user, get_optional_user)

The same hashing primitive serves account passwords and the unlock passwords
of private lists, presets and notes.  The two never share a column, so a
resource password can never be used to log in and vice versa.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt as _jwt        # PyJWT
from passlib.hash import pbkdf2_sha256 as _pbkdf2  # pure Python, no binary deps
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from core.config import settings
from database import get_db

# ---------------------------------------------------------------------------
# 1.  pbkdf2_sha256 – password hashing
# ---------------------------------------------------------------------------
# The salt and round count are embedded in the hash string (passlib
# convention), so changing PASSWORD_HASH_ROUNDS never invalidates old hashes.
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """
    Hash a plaintext password with PBKDF2-SHA256.

    Returns the full passlib hash string  e.g. "$pbkdf2-sha256$600000$...".
    """
    return _pbkdf2.using(rounds=settings.password_hash_rounds).hash(plain)


def verify_password(plain: str, stored_hash: Optional[str]) -> bool:
    """
    Constant-time verification of a plaintext password against a
    pbkdf2_sha256 hash produced by :func:`hash_password`.

    A missing or malformed hash verifies as ``False`` instead of raising.
    """
    if not plain or not stored_hash:
        return False
    try:
        return _pbkdf2.verify(plain, stored_hash)
    except (ValueError, TypeError):
        return False


# ---------------------------------------------------------------------------
# 2.  JWT – access tokens
# ---------------------------------------------------------------------------
# Claims: sub (username), user_id, exp.  Only user_id is trusted for lookups;
# sub is informational for the client.


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(
    username: str, user_id: str, expires_delta: Optional[timedelta] = None
) -> str:
    """Signed HS256 bearer token, valid ACCESS_TOKEN_EXPIRE_MINUTES by default."""
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        "sub": username,
        "user_id": user_id,
        "exp": datetime.now(timezone.utc) + lifetime,
    }
    return _jwt.encode(claims, settings.secret_key, algorithm="HS256")


def decode_access_token(token: str) -> dict:
    """Verified claims of *token*; HTTP 401 when expired, forged or malformed."""
    try:
        return _jwt.decode(token, settings.secret_key, algorithms=["HS256"])
    except _jwt.InvalidTokenError:  # ExpiredSignatureError is a subclass
        raise _unauthorized("Invalid or expired token")


# ---------------------------------------------------------------------------
# 3.  FastAPI dependency guards
# ---------------------------------------------------------------------------

# Account routes need a token; /lists, /presets and /notes accept one.
# tokenUrl only feeds the OpenAPI docs (login is POST /auth/login).
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def _user_from_token(token: str, db):
    from models.user import User  # models import database, which imports settings

    user_id = decode_access_token(token).get("user_id")
    user = db.get(User, user_id) if user_id else None
    if user is None:
        raise _unauthorized("User not found")
    return user


def get_current_user(token: str = Depends(oauth2_scheme), db=Depends(get_db)):
    """The signed-in User row; 401 without a valid token."""
    return _user_from_token(token, db)


def get_optional_user(token: Optional[str] = Depends(optional_oauth2_scheme), db=Depends(get_db)):
    """
    The signed-in User row, or ``None`` for an anonymous caller.

    A token that is present but invalid is still a 401: a caller who meant to
    be signed in must not be silently served the anonymous view.
    """
    if not token:
        return None
    return _user_from_token(token, db)
