"""Failure taxonomy and its HTTP translation."""

import pytest
from fastapi import HTTPException

from core.errors import (
    Conflict,
    InvalidCredential,
    NotFound,
    PermissionDenied,
    Result,
    ValidationError,
    raise_for_result,
)


@pytest.mark.parametrize(
    "exc, status_code",
    [
        (NotFound("List not found."), 404),
        (PermissionDenied("This list is locked."), 403),
        (InvalidCredential("Incorrect password."), 403),
        (ValidationError("The list name cannot be empty."), 400),
        (Conflict("Username is already taken."), 409),
    ],
)
def test_failed_result_raises_http_error(exc, status_code):
    with pytest.raises(HTTPException) as raised:
        raise_for_result(Result.fail(exc))

    assert raised.value.status_code == status_code
    assert raised.value.detail == exc.message


def test_override_changes_status_for_one_endpoint():
    result = Result.fail(InvalidCredential("Invalid credentials."))

    with pytest.raises(HTTPException) as raised:
        raise_for_result(result, {"invalid_credential": 401})
    assert raised.value.status_code == 401


def test_successful_result_passes_through():
    result = Result.ok("done", items=[])
    assert raise_for_result(result) is result
