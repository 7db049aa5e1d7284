# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Account operations – registration, login, password change, settings and the
single-use temporary login tokens.

Security notes
--------------
* Login returns the *same* failure whether the identifier doesn't exist or
  the password is wrong.  This prevents user-enumeration attacks.
* change_password verifies the old password before accepting the new one,
  so a stolen (but not yet expired) token alone cannot reset the password.
* Temporary tokens are invalidated on first use, valid or not.
"""

import re
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from core.errors import (
    AccessError,
    Conflict,
    InvalidCredential,
    NotFound,
    Result,
    ValidationError,
)
from core.logger import logger
from core.security import hash_password, verify_password
from core.tokens import TempTokenStore, temp_tokens
from models.user import User

# Generic message used for both "no such user" and "wrong password"
_LOGIN_FAIL = "Invalid credentials."

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

DEFAULT_SETTINGS = {
    "theme": "system",
    "language": "pl",
    "hideLocked": False,
    "colorTheme": "default",
    "groupByList": False,
    "showCompleted": True,
    "showTags": True,
    "workMode": "lists",
    "devMode": False,
}


def _validate_new_password(pw: Optional[str]) -> Optional[str]:
    """
    Return an error string if the password does not meet the minimum policy,
    or None if it is acceptable.

    Policy: >= 6 chars.
    """
    if not pw or len(pw) < 6:
        return "Password must be at least 6 characters"
    return None


def _validate_registration(username: str, email: str, password: str) -> Optional[str]:
    errors = []
    if not 3 <= len(username) <= 50:
        errors.append("Username must be between 3 and 50 characters")
    if not _EMAIL_RE.match(email):
        errors.append("Invalid email address")
    pw_error = _validate_new_password(password)
    if pw_error:
        errors.append(pw_error)
    return ", ".join(errors) or None


def user_view(user: User) -> dict:
    """Public profile: never includes the password hash or the e-mail."""
    return {
        "id": user.id,
        "username": user.username,
        "settings": {**DEFAULT_SETTINGS, **(user.settings or {})},
    }


def _run(db: Session, operation, *args) -> Result:
    """Commit on success, roll back and report on AccessError."""
    try:
        result = operation(db, *args)
    except AccessError as exc:
        db.rollback()
        return Result.fail(exc)
    except Exception:
        db.rollback()
        raise
    db.commit()
    return result


# ---------------------------------------------------------------------------
# Registration / login
# ---------------------------------------------------------------------------


def register(db: Session, username: str, email: str, password: str) -> Result:
    def _register(db):
        name = (username or "").strip()
        mail = (email or "").strip().lower()
        err = _validate_registration(name, mail, password or "")
        if err:
            raise ValidationError(err)

        existing = db.query(User).filter(or_(User.email == mail, User.username == name)).first()
        if existing is not None:
            if existing.email == mail:
                raise Conflict("User with this email already exists.")
            raise Conflict("Username is already taken.")

        user = User(
            username=name,
            email=mail,
            password_hash=hash_password(password),
            settings=dict(DEFAULT_SETTINGS),
        )
        db.add(user)
        db.flush()
        logger.info("user registered: %s", user.username)
        return Result.ok("Registration successful!", user=user_view(user))

    return _run(db, _register)


def authenticate(db: Session, identifier: str, password: str) -> Optional[User]:
    """Return the User for a username-or-email / password pair, else None."""
    if not identifier or not password:
        return None
    ident = identifier.strip()
    user = (
        db.query(User)
        .filter(or_(User.username == ident, User.email == ident.lower()))
        .first()
    )
    # Unified failure path – no information leaks about whether the user exists
    if user is None or not verify_password(password, user.password_hash):
        logger.info("failed login for identifier %r", ident)
        return None
    return user


def login(db: Session, identifier: str, password: str) -> Result:
    user = authenticate(db, identifier, password)
    if user is None:
        return Result.fail(InvalidCredential(_LOGIN_FAIL))
    logger.info("user logged in: %s", user.username)
    return Result.ok(user=user_view(user))


# ---------------------------------------------------------------------------
# Password / settings
# ---------------------------------------------------------------------------


def change_password(db: Session, user_id: str, current_password: str, new_password: str) -> Result:
    def _change(db):
        if not current_password:
            raise ValidationError("Current password is required")
        err = _validate_new_password(new_password)
        if err:
            raise ValidationError(err)

        user = db.get(User, user_id)
        if user is None:
            raise NotFound("User not found.")
        if not verify_password(current_password, user.password_hash):
            raise InvalidCredential("Incorrect current password.")

        user.password_hash = hash_password(new_password)
        logger.info("password changed for user %s", user.username)
        return Result.ok("Password updated successfully.")

    return _run(db, _change)


def update_settings(db: Session, user_id: str, changes: dict) -> Result:
    """Merge *changes* into the stored settings (partial update)."""

    def _update(db):
        user = db.get(User, user_id)
        if user is None:
            raise NotFound("User not found.")
        # reassign so the JSON column is flagged dirty
        user.settings = {**(user.settings or {}), **changes}
        return Result.ok(user=user_view(user))

    return _run(db, _update)


# ---------------------------------------------------------------------------
# Temporary login tokens
# ---------------------------------------------------------------------------


def generate_temp_login_token(
    db: Session, user_id: str, store: TempTokenStore = temp_tokens
) -> Result:
    if not user_id or db.get(User, user_id) is None:
        return Result.fail(NotFound("User not found."))
    token = store.issue(user_id)
    logger.info("temporary login token issued for user %s", user_id)
    return Result.ok(token=token)


def login_with_temp_token(db: Session, token: str, store: TempTokenStore = temp_tokens) -> Result:
    user_id = store.redeem(token) if token else None
    if user_id is None:
        return Result.fail(InvalidCredential("Token is invalid or has expired."))
    user = db.get(User, user_id)
    if user is None:
        return Result.fail(NotFound("User not found."))
    logger.info("user %s logged in with a temporary token", user.username)
    return Result.ok(user=user_view(user))
