"""Tasks inside lists and presets: readable and editable only through an open parent."""

import pytest

from models.checklist import Task
from models.preset import PresetTask
from resources.kinds import list_service, preset_service, preset_task_service, task_service


def _list(db, name="Groceries", privacy="public", password=None, user_id=None):
    result = list_service.create(db, name=name, privacy=privacy, password=password, user_id=user_id)
    assert result.success, result.message
    return result.resource["id"]


def _task(db, list_id, name="Milk", user_id=None, **fields):
    result = task_service.add(db, list_id, name=name, user_id=user_id, **fields)
    assert result.success, result.message
    return result.resource["id"]


def _names(views):
    return [v["name"] for v in views]


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def test_locked_list_tasks_are_withheld_until_unlocked(db_session, alice, bob):
    secret = _list(db_session, "Secrets", "private", "abc123", alice)
    _task(db_session, secret, "Buy ring", alice)

    assert _names(task_service.list(db_session, secret, alice).items) == ["Buy ring"]

    locked = task_service.list(db_session, secret, bob)
    assert locked.error == "permission_denied"
    assert locked.items is None
    assert task_service.list_all(db_session, bob) == []

    assert list_service.verify_password(db_session, secret, "abc123", bob).success

    assert _names(task_service.list(db_session, secret, bob).items) == ["Buy ring"]
    assert _names(task_service.list_all(db_session, bob)) == ["Buy ring"]


def test_rotation_hides_tasks_again(db_session, alice, bob):
    secret = _list(db_session, "Secrets", "private", "abc123", alice)
    _task(db_session, secret, "Buy ring", alice)
    list_service.verify_password(db_session, secret, "abc123", bob)

    list_service.update(db_session, secret, privacy="private", current_password="abc123",
                        new_password="xyz789", user_id=alice)

    assert task_service.list(db_session, secret, bob).error == "permission_denied"
    assert task_service.list_all(db_session, bob) == []


def test_list_all_mixes_open_lists_and_unfiled_tasks(db_session, alice, bob):
    public = _list(db_session, "Open")
    personal = _list(db_session, "Mine", "personal", user_id=alice)
    _task(db_session, public, "Public task")
    _task(db_session, personal, "Alice only", alice)
    _task(db_session, None, "Unfiled")

    assert sorted(_names(task_service.list_all(db_session, alice))) == ["Alice only", "Public task", "Unfiled"]
    assert sorted(_names(task_service.list_all(db_session, bob))) == ["Public task", "Unfiled"]
    assert sorted(_names(task_service.list_all(db_session, None))) == ["Public task", "Unfiled"]


def test_tasks_of_unknown_list(db_session):
    assert task_service.list(db_session, "nope").error == "not_found"


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def test_locked_list_rejects_task_writes(db_session, alice, bob):
    secret = _list(db_session, "Secrets", "private", "abc123", alice)
    task_id = _task(db_session, secret, "Buy ring", alice)

    assert task_service.add(db_session, secret, name="Sneaky", user_id=bob).error == "permission_denied"
    assert task_service.update(db_session, task_id, user_id=bob, name="Changed").error == "permission_denied"
    assert task_service.delete(db_session, task_id, bob).error == "permission_denied"
    assert task_service.reorder(db_session, [(task_id, 7)], bob).error == "permission_denied"

    db_session.expire_all()
    row = db_session.get(Task, task_id)
    assert (row.name, row.order_position) == ("Buy ring", 0)
    assert db_session.query(Task).count() == 1


def test_add_appends_and_update_applies(db_session, alice):
    list_id = _list(db_session)
    first = _task(db_session, list_id, "Milk")
    second = _task(db_session, list_id, "Bread", tags=["bakery"])

    views = task_service.list(db_session, list_id).items
    assert [(v["id"], v["order_position"]) for v in views] == [(first, 0), (second, 1)]
    assert views[1]["tags"] == ["bakery"]
    assert views[0]["tags"] == []

    result = task_service.update(db_session, first, done=True, description="2 litres")
    assert result.success
    assert result.resource["done"] is True
    assert result.resource["description"] == "2 litres"

    assert task_service.update(db_session, first, name="  ").error == "validation_error"


def test_assignee_must_be_able_to_open_the_list(db_session, alice, bob):
    secret = _list(db_session, "Secrets", "private", "abc123", alice)
    task_id = _task(db_session, secret, "Buy ring", alice)

    refused = task_service.update(db_session, task_id, user_id=alice, assignee_id=bob)
    assert refused.error == "validation_error"

    list_service.verify_password(db_session, secret, "abc123", bob)
    assert task_service.update(db_session, task_id, user_id=alice, assignee_id=bob).success

    cleared = task_service.update(db_session, task_id, user_id=alice, assignee_id=None)
    assert cleared.resource["assignee_id"] is None


def test_move_drops_assignee_who_cannot_follow(db_session, alice, bob):
    public = _list(db_session, "Open")
    mine = _list(db_session, "Mine", "personal", user_id=alice)
    task_id = _task(db_session, public, "Call", alice, assignee_id=bob)

    assert task_service.move(db_session, task_id, mine, bob).error == "permission_denied"

    moved = task_service.move(db_session, task_id, mine, alice)
    assert moved.success
    assert moved.resource["list_id"] == mine
    assert moved.resource["assignee_id"] is None


def test_delete_done_only_touches_one_list(db_session):
    a = _list(db_session, "A")
    b = _list(db_session, "B")
    done_a = _task(db_session, a, "Done in A")
    _task(db_session, a, "Open in A")
    done_b = _task(db_session, b, "Done in B")
    task_service.update(db_session, done_a, done=True)
    task_service.update(db_session, done_b, done=True)

    assert task_service.delete_done(db_session, a).success

    assert _names(task_service.list(db_session, a).items) == ["Open in A"]
    assert _names(task_service.list(db_session, b).items) == ["Done in B"]


def test_deleting_a_list_removes_its_tasks(db_session, alice):
    list_id = _list(db_session, "Temp", user_id=alice)
    _task(db_session, list_id, "Gone soon")
    _task(db_session, None, "Stays")

    assert list_service.delete(db_session, list_id, user_id=alice).success

    db_session.expire_all()
    assert [t.name for t in db_session.query(Task).all()] == ["Stays"]


def test_unknown_task_field_is_a_programming_error(db_session):
    list_id = _list(db_session)
    with pytest.raises(TypeError):
        task_service.add(db_session, list_id, name="X", colour="red")


# ---------------------------------------------------------------------------
# Preset tasks
# ---------------------------------------------------------------------------


def _preset(db, name="Morning", privacy="public", password=None, user_id=None):
    result = preset_service.create(db, name=name, privacy=privacy, password=password, user_id=user_id)
    assert result.success, result.message
    return result.resource["id"]


def test_preset_tasks_follow_the_preset_lock(db_session, alice, bob):
    preset_id = _preset(db_session, "Routine", "private", "abc123", alice)
    assert preset_task_service.add(db_session, preset_id, name="Stretch", user_id=alice).success

    assert preset_task_service.list(db_session, preset_id, bob).error == "permission_denied"
    preset_service.verify_password(db_session, preset_id, "abc123", bob)
    assert _names(preset_task_service.list(db_session, preset_id, bob).items) == ["Stretch"]


def test_preset_tasks_need_a_preset(db_session):
    assert preset_task_service.add(db_session, None, name="Orphan").error == "validation_error"


def test_reset_preset(db_session):
    preset_id = _preset(db_session)
    item = preset_task_service.add(db_session, preset_id, name="Stretch").resource["id"]
    preset_task_service.update(db_session, item, done=True)

    assert preset_task_service.reset_done(db_session, preset_id).success

    db_session.expire_all()
    assert db_session.get(PresetTask, item).done is False


def test_preset_tasks_cannot_move(db_session):
    a = _preset(db_session, "A")
    b = _preset(db_session, "B")
    item = preset_task_service.add(db_session, a, name="Stretch").resource["id"]

    assert preset_task_service.move(db_session, item, b).error == "validation_error"
