# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""User ORM model."""

import uuid

from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func

from database import Base


def new_id() -> str:
    """Primary keys are UUID strings so ids cannot be enumerated."""
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    # Account login password only – resource unlock passwords live on the
    # resource rows and are never compared against this column.
    password_hash = Column(String(255), nullable=False)
    # UI preferences (language, theme, hideLocked …); merged over defaults on read
    settings = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
