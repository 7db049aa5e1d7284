# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Note ORM model and its access ledger."""

from sqlalchemy import Column, String, Text, JSON, ForeignKey

from database import Base
from models.resource import AccessGrantMixin, GuardedResourceMixin


class Note(GuardedResourceMixin, Base):
    __tablename__ = "notes"

    # Unlike lists and presets, note names do not have to be unique.
    name = Column(String(255), nullable=False)
    content = Column(Text, nullable=True)
    tags = Column(JSON, nullable=True)  # list of tag names


class UserNoteAccess(AccessGrantMixin, Base):
    __tablename__ = "user_note_access"

    resource_id = Column(
        "note_id",
        String(36),
        ForeignKey("notes.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
