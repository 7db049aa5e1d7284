# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Preset ORM model (reusable task templates), its access ledger and its tasks."""

from sqlalchemy import Column, String, ForeignKey

from database import Base
from models.resource import AccessGrantMixin, ChildItemMixin, GuardedResourceMixin


class Preset(GuardedResourceMixin, Base):
    __tablename__ = "presets"

    name = Column(String(255), unique=True, nullable=False)


class UserPresetAccess(AccessGrantMixin, Base):
    __tablename__ = "user_preset_access"

    resource_id = Column(
        "preset_id",
        String(36),
        ForeignKey("presets.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )


class PresetTask(ChildItemMixin, Base):
    __tablename__ = "preset_tasks"

    name = Column("task_name", String(255), nullable=False)
    preset_id = Column(String(36), ForeignKey("presets.id", ondelete="CASCADE"), nullable=False, index=True)
