# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
The three privacy levels as a tagged variant.

A resource row stores its privacy flat (``privacy``, ``password_hash``,
``owner_id``).  Everything above the storage boundary works on one of
:class:`Public`, :class:`Private` or :class:`Personal` instead, so a private
resource without a hash or a personal resource without an owner cannot be
expressed.  :func:`read_privacy` and :func:`write_privacy` are the only two
places that touch the flat columns.
"""

from dataclasses import dataclass
from typing import Union

PUBLIC = "public"
PRIVATE = "private"
PERSONAL = "personal"


@dataclass(frozen=True)
class Public:
    level = PUBLIC


@dataclass(frozen=True)
class Private:
    password_hash: str
    level = PRIVATE


@dataclass(frozen=True)
class Personal:
    owner_id: str
    level = PERSONAL


PrivacyState = Union[Public, Private, Personal]


class CorruptPrivacyState(ValueError):
    """A stored row violates the hash/owner invariants."""


def read_privacy(row) -> PrivacyState:
    """Convert a resource row's flat columns into a privacy variant."""
    level = row.privacy or PUBLIC
    if level == PRIVATE:
        if not row.password_hash or row.owner_id is not None:
            raise CorruptPrivacyState(f"{row.__tablename__} {row.id}: invalid private row")
        return Private(row.password_hash)
    if level == PERSONAL:
        if not row.owner_id or row.password_hash is not None:
            raise CorruptPrivacyState(f"{row.__tablename__} {row.id}: invalid personal row")
        return Personal(row.owner_id)
    if level != PUBLIC or row.password_hash is not None or row.owner_id is not None:
        raise CorruptPrivacyState(f"{row.__tablename__} {row.id}: invalid public row")
    return Public()


def write_privacy(row, state: PrivacyState) -> None:
    """Store *state* on *row*, keeping the three columns consistent."""
    row.privacy = state.level
    row.password_hash = state.password_hash if isinstance(state, Private) else None
    row.owner_id = state.owner_id if isinstance(state, Personal) else None
