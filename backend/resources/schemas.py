# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the list, preset and note endpoints."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel

PrivacyLevel = Literal["public", "private", "personal"]


# -- Requests --------------------------------------------------------------
# Passwords are sent in plaintext over TLS and hashed server-side; no hash is
# ever accepted from or returned to the client.


class ResourceCreate(BaseModel):
    name: str
    color: Optional[str] = None
    privacy: PrivacyLevel = "public"
    password: Optional[str] = None  # required when privacy == "private"


class ResourceUpdate(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None
    privacy: Optional[PrivacyLevel] = None  # None keeps the current level
    current_password: Optional[str] = None  # required while the resource is private
    new_password: Optional[str] = None  # sets or rotates the password


class NoteCreate(ResourceCreate):
    content: str = ""
    tags: List[str] = []


class NoteUpdate(ResourceUpdate):
    content: Optional[str] = None
    tags: Optional[List[str]] = None


class PasswordRequest(BaseModel):
    password: Optional[str] = None


class OrderItem(BaseModel):
    id: str
    order_position: int


# -- Responses -------------------------------------------------------------


class ResourceOut(BaseModel):
    id: str
    name: str
    color: Optional[str] = None
    privacy: PrivacyLevel
    has_access: bool
    order_position: int
    created_at: Optional[datetime] = None


class NoteOut(ResourceOut):
    content: str  # empty unless has_access
    tags: List[str]


class ResourceResult(BaseModel):
    success: bool
    message: Optional[str] = None
    resource: Optional[ResourceOut] = None


class NoteResult(BaseModel):
    success: bool
    message: Optional[str] = None
    resource: Optional[NoteOut] = None


class StatusResponse(BaseModel):
    success: bool
    message: Optional[str] = None


class MemberOut(BaseModel):
    id: str
    username: str


# -- Items (tasks of a list, tasks of a preset) ------------------------------
# Update bodies are applied with exclude_unset: an explicit null clears.


class TaskCreate(BaseModel):
    name: str
    list_id: Optional[str] = None  # None files the task nowhere
    description: Optional[str] = None
    tags: List[str] = []
    assignee_id: Optional[str] = None
    due_date: Optional[datetime] = None


class TaskUpdate(BaseModel):
    name: Optional[str] = None
    done: Optional[bool] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    assignee_id: Optional[str] = None
    due_date: Optional[datetime] = None


class TaskMove(BaseModel):
    list_id: Optional[str] = None


class TaskOut(BaseModel):
    id: str
    name: str
    done: bool
    list_id: Optional[str] = None
    description: Optional[str] = None
    tags: List[str]
    assignee_id: Optional[str] = None
    due_date: Optional[datetime] = None
    order_position: int
    created_at: Optional[datetime] = None


class TaskResult(BaseModel):
    success: bool
    message: Optional[str] = None
    resource: Optional[TaskOut] = None


class PresetTaskCreate(BaseModel):
    name: str
    preset_id: str
    description: Optional[str] = None


class PresetTaskUpdate(BaseModel):
    name: Optional[str] = None
    done: Optional[bool] = None
    description: Optional[str] = None


class PresetTaskOut(BaseModel):
    id: str
    name: str
    done: bool
    preset_id: str
    description: Optional[str] = None
    order_position: int
    created_at: Optional[datetime] = None


class PresetTaskResult(BaseModel):
    success: bool
    message: Optional[str] = None
    resource: Optional[PresetTaskOut] = None
