# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""TaskList ORM model, its access ledger and the tasks it holds."""

from sqlalchemy import Column, String, DateTime, JSON, ForeignKey

from database import Base
from models.resource import AccessGrantMixin, ChildItemMixin, GuardedResourceMixin


class TaskList(GuardedResourceMixin, Base):
    __tablename__ = "lists"

    name = Column(String(255), unique=True, nullable=False)


class UserListAccess(AccessGrantMixin, Base):
    __tablename__ = "user_list_access"

    resource_id = Column(
        "list_id",
        String(36),
        ForeignKey("lists.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )


class Task(ChildItemMixin, Base):
    __tablename__ = "tasks"

    name = Column(String(255), nullable=False)
    # NULL: an unfiled task, visible to everyone
    list_id = Column(String(36), ForeignKey("lists.id", ondelete="CASCADE"), nullable=True, index=True)
    tags = Column(JSON, nullable=True)
    assignee_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
