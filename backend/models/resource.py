# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Columns shared by every privacy-guarded resource (lists, presets, notes) and
by their access-grant ledgers.

Row invariants (enforced by access.privacy, never by callers):
* password_hash is set  ⇔  privacy == "private"
* owner_id is set       ⇔  privacy == "personal"
"""

from sqlalchemy import Boolean, Column, Integer, String, Text, DateTime, Enum, ForeignKey
from sqlalchemy.orm import declared_attr
from sqlalchemy.sql import func

from models.user import new_id

PRIVACY_LEVELS = ("public", "private", "personal")


class GuardedResourceMixin:
    id = Column(String(36), primary_key=True, default=new_id)
    color = Column(String(32), nullable=True)
    # NULL is read as "public" (rows created before privacy existed)
    privacy = Column(Enum(*PRIVACY_LEVELS, name="privacy_level"), nullable=True)
    password_hash = Column(String(255), nullable=True)
    order_position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @declared_attr
    def owner_id(cls):
        # Cascade delete: removing a user removes their personal resources.
        return Column(
            String(36),
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=True,
            index=True,
        )


class AccessGrantMixin:
    """
    One row per (user, resource) that has unlocked a private resource since
    its last password rotation.  Subclasses add ``resource_id`` mapped onto
    their own ``<kind>_id`` column.
    """

    @declared_attr
    def user_id(cls):
        return Column(
            String(36),
            ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        )

    granted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class ChildItemMixin:
    """
    Rows that live inside a guarded resource (tasks of a list, tasks of a
    preset).  They carry no privacy of their own: whoever can open the parent
    can read and edit them, nobody else can.
    """

    id = Column(String(36), primary_key=True, default=new_id)
    description = Column(Text, nullable=True)
    done = Column(Boolean, nullable=False, default=False)
    order_position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
