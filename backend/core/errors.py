"""
Failure taxonomy shared by the account and resource services.

Services raise :class:`AccessError` subclasses internally and convert them to
a failed :class:`Result` at their boundary, so callers only ever branch on
``result.success``.  Anything that is not an ``AccessError`` (lost database
connection, constraint violation …) is a fault and propagates.
"""

from dataclasses import dataclass
from typing import List, Optional

from fastapi import HTTPException


class AccessError(Exception):
    """Base class for expected, caller-visible failures."""

    code = "access_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(AccessError):
    code = "not_found"


class PermissionDenied(AccessError):
    code = "permission_denied"


class InvalidCredential(AccessError):
    code = "invalid_credential"


class ValidationError(AccessError):
    code = "validation_error"


class Conflict(ValidationError):
    """A unique value (username, e-mail) is already taken."""

    code = "conflict"


@dataclass
class Result:
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    resource: Optional[dict] = None
    user: Optional[dict] = None
    token: Optional[str] = None
    items: Optional[List[dict]] = None

    @classmethod
    def ok(cls, message: Optional[str] = None, **fields) -> "Result":
        return cls(success=True, message=message, **fields)

    @classmethod
    def fail(cls, exc: AccessError) -> "Result":
        return cls(success=False, message=exc.message, error=exc.code)


# HTTP status for each failure code; routers raise instead of returning 200
_HTTP_STATUS = {
    NotFound.code: 404,
    PermissionDenied.code: 403,
    InvalidCredential.code: 403,
    ValidationError.code: 400,
    Conflict.code: 409,
}


def raise_for_result(result: Result, overrides: Optional[dict] = None) -> Result:
    """
    Turn a failed service Result into an ``HTTPException``.  *overrides* maps
    failure codes to a different status for one endpoint.
    """
    if not result.success:
        codes = {**_HTTP_STATUS, **(overrides or {})}
        raise HTTPException(
            status_code=codes.get(result.error, 400),
            detail=result.message,
        )
    return result
