"""The three privacy-guarded resource kinds, the items they hold, and their services."""

from access.items import ItemKind, ItemService
from access.service import ResourceKind, ResourceService
from models.checklist import Task, TaskList, UserListAccess
from models.note import Note, UserNoteAccess
from models.preset import Preset, PresetTask, UserPresetAccess


def _null():
    return None


LISTS = ResourceKind(
    label="list",
    model=TaskList,
    grant_model=UserListAccess,
    children=((Task, "list_id"),),
)

PRESETS = ResourceKind(
    label="preset",
    model=Preset,
    grant_model=UserPresetAccess,
    children=((PresetTask, "preset_id"),),
)

NOTES = ResourceKind(
    label="note",
    model=Note,
    grant_model=UserNoteAccess,
    unique_names=False,
    extra_fields={"content": str, "tags": list},
)

list_service = ResourceService(LISTS)
preset_service = ResourceService(PRESETS)
note_service = ResourceService(NOTES)

TASKS = ItemKind(
    label="task",
    model=Task,
    parent=list_service,
    parent_field="list_id",
    allow_unfiled=True,
    movable=True,
    fields={"description": _null, "tags": list, "assignee_id": _null, "due_date": _null},
)

PRESET_TASKS = ItemKind(
    label="preset task",
    model=PresetTask,
    parent=preset_service,
    parent_field="preset_id",
    fields={"description": _null},
)

task_service = ItemService(TASKS)
preset_task_service = ItemService(PRESET_TASKS)
