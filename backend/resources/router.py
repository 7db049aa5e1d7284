# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
List, preset and note endpoints, and the task endpoints of lists and presets.

The three routers are built by one factory because the three resource kinds
share every access rule; only the request/response schemas differ (notes
carry ``content`` and ``tags``).

Security invariants enforced by every handler
---------------------------------------------
* A bearer token is optional.  Anonymous callers see public and private
  entries (the latter locked) and never see personal ones.
* No handler decides access itself: every call goes through the resource
  service, which re-reads the stored privacy level inside its transaction.
* Password hashes are never serialized; note bodies of locked notes are
  returned empty.
"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_db
from core.errors import raise_for_result
from core.security import get_optional_user
from access.items import ItemService
from access.service import ResourceService
from resources.kinds import (
    list_service,
    note_service,
    preset_service,
    preset_task_service,
    task_service,
)
from resources.schemas import (
    MemberOut,
    NoteCreate,
    NoteOut,
    NoteResult,
    NoteUpdate,
    OrderItem,
    PasswordRequest,
    PresetTaskCreate,
    PresetTaskOut,
    PresetTaskResult,
    PresetTaskUpdate,
    ResourceCreate,
    ResourceOut,
    ResourceResult,
    ResourceUpdate,
    StatusResponse,
    TaskCreate,
    TaskMove,
    TaskOut,
    TaskResult,
    TaskUpdate,
)

_CREATE_FIELDS = {"name", "color", "privacy", "password"}
_UPDATE_FIELDS = {"name", "color", "privacy", "current_password", "new_password"}


def _uid(user) -> Optional[str]:
    return user.id if user is not None else None


def build_router(
    service: ResourceService,
    *,
    prefix: str,
    create_schema=ResourceCreate,
    update_schema=ResourceUpdate,
    out_schema=ResourceOut,
    result_schema=ResourceResult,
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[prefix.strip("/")])

    # ------------------------------------------------------------------
    # GET /<kind>  – visible entries, each with has_access
    # ------------------------------------------------------------------

    @router.get("", response_model=List[out_schema])
    def list_resources(
        hide_locked: bool = False,
        current_user=Depends(get_optional_user),
        db: Session = Depends(get_db),
    ):
        return service.list(db, _uid(current_user), hide_locked)

    # ------------------------------------------------------------------
    # POST /<kind>  – create
    # ------------------------------------------------------------------

    @router.post("", response_model=result_schema, status_code=status.HTTP_201_CREATED)
    def create_resource(
        body: create_schema,
        current_user=Depends(get_optional_user),
        db: Session = Depends(get_db),
    ):
        result = service.create(
            db,
            name=body.name,
            color=body.color,
            privacy=body.privacy,
            password=body.password,
            user_id=_uid(current_user),
            **body.model_dump(exclude=_CREATE_FIELDS),
        )
        raise_for_result(result)
        return result_schema(success=True, resource=result.resource)

    # ------------------------------------------------------------------
    # PUT /<kind>/order  – persist drag-and-drop order
    # ------------------------------------------------------------------
    # Declared before PUT /{id} so "order" is never taken for an id.

    @router.put("/order", response_model=StatusResponse)
    def reorder_resources(
        body: List[OrderItem],
        current_user=Depends(get_optional_user),
        db: Session = Depends(get_db),
    ):
        result = service.reorder(
            db, [(item.id, item.order_position) for item in body], _uid(current_user)
        )
        raise_for_result(result)
        return StatusResponse(success=True)

    # ------------------------------------------------------------------
    # PUT /<kind>/{id}  – metadata and privacy changes
    # ------------------------------------------------------------------

    @router.put("/{resource_id}", response_model=result_schema)
    def update_resource(
        resource_id: str,
        body: update_schema,
        current_user=Depends(get_optional_user),
        db: Session = Depends(get_db),
    ):
        result = service.update(
            db,
            resource_id,
            user_id=_uid(current_user),
            name=body.name,
            color=body.color,
            privacy=body.privacy,
            current_password=body.current_password,
            new_password=body.new_password,
            **body.model_dump(exclude=_UPDATE_FIELDS),
        )
        raise_for_result(result)
        return result_schema(success=True, resource=result.resource)

    # ------------------------------------------------------------------
    # DELETE /<kind>/{id}  – password in the JSON body for private entries
    # ------------------------------------------------------------------

    @router.delete("/{resource_id}", response_model=StatusResponse)
    def delete_resource(
        resource_id: str,
        body: Optional[PasswordRequest] = None,
        current_user=Depends(get_optional_user),
        db: Session = Depends(get_db),
    ):
        password = body.password if body else None
        result = service.delete(db, resource_id, password, _uid(current_user))
        raise_for_result(result)
        return StatusResponse(success=True)

    # ------------------------------------------------------------------
    # POST /<kind>/{id}/unlock  – always 200, success tells the outcome
    # ------------------------------------------------------------------

    @router.post("/{resource_id}/unlock", response_model=StatusResponse)
    def unlock_resource(
        resource_id: str,
        body: PasswordRequest,
        current_user=Depends(get_optional_user),
        db: Session = Depends(get_db),
    ):
        result = service.verify_password(db, resource_id, body.password, _uid(current_user))
        return StatusResponse(success=result.success)

    # ------------------------------------------------------------------
    # POST /<kind>/{id}/revoke  – kick everyone else out
    # ------------------------------------------------------------------

    @router.post("/{resource_id}/revoke", response_model=StatusResponse)
    def revoke_access(
        resource_id: str,
        current_user=Depends(get_optional_user),
        db: Session = Depends(get_db),
    ):
        result = service.revoke_all(db, resource_id, _uid(current_user))
        raise_for_result(result)
        return StatusResponse(success=True)

    # ------------------------------------------------------------------
    # GET /<kind>/{id}/members  – users able to open the entry
    # ------------------------------------------------------------------

    @router.get("/{resource_id}/members", response_model=List[MemberOut])
    def list_members(
        resource_id: str,
        current_user=Depends(get_optional_user),
        db: Session = Depends(get_db),
    ):
        result = raise_for_result(service.members(db, resource_id, _uid(current_user)))
        return result.items

    return router


lists_router = build_router(list_service, prefix="/lists")
presets_router = build_router(preset_service, prefix="/presets")
notes_router = build_router(
    note_service,
    prefix="/notes",
    create_schema=NoteCreate,
    update_schema=NoteUpdate,
    out_schema=NoteOut,
    result_schema=NoteResult,
)


def build_item_router(
    service: ItemService,
    *,
    prefix: str,
    create_schema,
    update_schema,
    out_schema,
    result_schema,
    move_schema=None,
) -> APIRouter:
    """
    Routes for the items inside a resource.  The parent id travels as
    ``<parent_field>`` (query string on GET, JSON body elsewhere); every
    call is refused with 403 while the parent is locked for the caller.
    """
    parent_field = service.kind.parent_field
    router = APIRouter(prefix=prefix, tags=[prefix.strip("/")])

    @router.get("", response_model=List[out_schema])
    def list_items(
        parent_id: Optional[str] = Query(None, alias=parent_field),
        current_user=Depends(get_optional_user),
        db: Session = Depends(get_db),
    ):
        """Without a parent id: everything the caller can open."""
        if parent_id is None:
            return service.list_all(db, _uid(current_user))
        return raise_for_result(service.list(db, parent_id, _uid(current_user))).items

    @router.post("", response_model=result_schema, status_code=status.HTTP_201_CREATED)
    def add_item(
        body: create_schema,
        current_user=Depends(get_optional_user),
        db: Session = Depends(get_db),
    ):
        result = raise_for_result(
            service.add(
                db,
                getattr(body, parent_field),
                name=body.name,
                user_id=_uid(current_user),
                **body.model_dump(exclude={"name", parent_field}),
            )
        )
        return result_schema(success=True, resource=result.resource)

    @router.put("/order", response_model=StatusResponse)
    def reorder_items(
        body: List[OrderItem],
        current_user=Depends(get_optional_user),
        db: Session = Depends(get_db),
    ):
        raise_for_result(
            service.reorder(db, [(i.id, i.order_position) for i in body], _uid(current_user))
        )
        return StatusResponse(success=True)

    @router.post("/clear-done", response_model=StatusResponse)
    def clear_done(
        parent_id: Optional[str] = Body(None, embed=True, alias=parent_field),
        current_user=Depends(get_optional_user),
        db: Session = Depends(get_db),
    ):
        result = raise_for_result(service.delete_done(db, parent_id, _uid(current_user)))
        return StatusResponse(success=True, message=result.message)

    @router.post("/reset", response_model=StatusResponse)
    def reset_items(
        parent_id: Optional[str] = Body(None, embed=True, alias=parent_field),
        current_user=Depends(get_optional_user),
        db: Session = Depends(get_db),
    ):
        raise_for_result(service.reset_done(db, parent_id, _uid(current_user)))
        return StatusResponse(success=True)

    @router.put("/{item_id}", response_model=result_schema)
    def update_item(
        item_id: str,
        body: update_schema,
        current_user=Depends(get_optional_user),
        db: Session = Depends(get_db),
    ):
        result = raise_for_result(
            service.update(db, item_id, user_id=_uid(current_user), **body.model_dump(exclude_unset=True))
        )
        return result_schema(success=True, resource=result.resource)

    @router.delete("/{item_id}", response_model=StatusResponse)
    def delete_item(
        item_id: str,
        current_user=Depends(get_optional_user),
        db: Session = Depends(get_db),
    ):
        raise_for_result(service.delete(db, item_id, _uid(current_user)))
        return StatusResponse(success=True)

    if move_schema is not None:

        @router.post("/{item_id}/move", response_model=result_schema)
        def move_item(
            item_id: str,
            body: move_schema,
            current_user=Depends(get_optional_user),
            db: Session = Depends(get_db),
        ):
            result = raise_for_result(
                service.move(db, item_id, getattr(body, parent_field), _uid(current_user))
            )
            return result_schema(success=True, resource=result.resource)

    return router


tasks_router = build_item_router(
    task_service,
    prefix="/tasks",
    create_schema=TaskCreate,
    update_schema=TaskUpdate,
    out_schema=TaskOut,
    result_schema=TaskResult,
    move_schema=TaskMove,
)
preset_tasks_router = build_item_router(
    preset_task_service,
    prefix="/preset-tasks",
    create_schema=PresetTaskCreate,
    update_schema=PresetTaskUpdate,
    out_schema=PresetTaskOut,
    result_schema=PresetTaskResult,
)
