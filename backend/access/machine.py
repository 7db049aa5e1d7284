# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Privacy state machine – guards and transitions for editing a resource.

Guards run before anything is written:
1. A personal resource may only be changed by its owner.
2. A private resource may only be changed (or deleted) by someone who
   presents its current password, whatever the target level is.

Transitions
-----------
* → private, was not private  : new password required; ledger reset and the
                                actor re-granted.
* → private, was private      : no new password keeps hash and ledger;
                                a new password rotates the hash, resets the
                                ledger and re-grants the actor only.
* → public / personal         : hash cleared, ledger reset, owner set to the
                                actor (personal) or cleared (public).
* same level, no new password : metadata only, ledger untouched.

Nothing here touches the database; :class:`Transition` tells the resource
service what to write.
"""

from dataclasses import dataclass
from typing import Optional

from core.errors import InvalidCredential, PermissionDenied, ValidationError
from core.security import hash_password, verify_password
from access.privacy import (
    PERSONAL,
    PRIVATE,
    PUBLIC,
    Personal,
    PrivacyState,
    Private,
    Public,
)

VALID_LEVELS = (PUBLIC, PRIVATE, PERSONAL)


@dataclass(frozen=True)
class Transition:
    state: PrivacyState
    reset_ledger: bool = False  # revoke every grant before writing
    regrant: Optional[str] = None  # user granted again after the reset

    @property
    def rotates_password(self) -> bool:
        return isinstance(self.state, Private) and self.reset_ledger


def guard_change(
    state: PrivacyState,
    *,
    user_id: Optional[str],
    password: Optional[str],
    label: str,
    action: str = "edit",
) -> None:
    """Raise unless *user_id* may edit/delete a resource currently in *state*."""
    if isinstance(state, Personal) and state.owner_id != user_id:
        raise PermissionDenied(f"You do not have permission to {action} this {label}.")
    if isinstance(state, Private):
        if not password:
            raise InvalidCredential(
                f"The current password is required to {action} a private {label}."
            )
        if not verify_password(password, state.password_hash):
            raise InvalidCredential("Incorrect password.")


def plan_transition(
    state: PrivacyState,
    target: Optional[str],
    *,
    user_id: Optional[str],
    new_password: Optional[str],
    label: str,
) -> Transition:
    """
    Work out the new privacy state.  Call only after :func:`guard_change`
    passed for the same actor.
    """
    target = target or state.level
    if target not in VALID_LEVELS:
        raise ValidationError(f"Unknown privacy level '{target}'.")
    new_password = new_password or None  # "" means "keep"

    if target == PRIVATE:
        if isinstance(state, Private) and new_password is None:
            return Transition(state)
        if new_password is None:
            raise ValidationError(f"A password is required to make this {label} private.")
        return Transition(Private(hash_password(new_password)), reset_ledger=True, regrant=user_id)

    if target == PERSONAL:
        if isinstance(state, Personal):
            return Transition(state)
        if not user_id:
            raise ValidationError(f"You must be signed in to make this {label} personal.")
        return Transition(Personal(user_id), reset_ledger=True)

    if isinstance(state, Public):
        return Transition(state)
    return Transition(Public(), reset_ledger=True)


def plan_creation(
    target: Optional[str],
    *,
    user_id: Optional[str],
    password: Optional[str],
    label: str,
) -> Transition:
    """A new resource starts from public and moves to its requested level."""
    return plan_transition(
        Public(), target or PUBLIC, user_id=user_id, new_password=password, label=label
    )
