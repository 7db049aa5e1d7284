"""Access ledger against a real (SQLite) session."""

from access.ledger import AccessLedger
from models.checklist import TaskList, UserListAccess


def _list(db, name="Secrets"):
    row = TaskList(name=name, privacy="public")
    db.add(row)
    db.commit()
    return row.id


def test_grant_is_idempotent(db_session, alice):
    ledger = AccessLedger(UserListAccess)
    list_id = _list(db_session)

    assert ledger.grant(db_session, alice, list_id) is True
    assert ledger.grant(db_session, alice, list_id) is False
    db_session.commit()

    rows = db_session.query(UserListAccess).filter_by(user_id=alice, resource_id=list_id).all()
    assert len(rows) == 1


def test_has_grant(db_session, alice, bob):
    ledger = AccessLedger(UserListAccess)
    list_id = _list(db_session)
    ledger.grant(db_session, alice, list_id)

    assert ledger.has_grant(db_session, alice, list_id)
    assert not ledger.has_grant(db_session, bob, list_id)
    assert not ledger.has_grant(db_session, None, list_id)


def test_revoke_all_only_touches_one_resource(db_session, alice, bob):
    ledger = AccessLedger(UserListAccess)
    first = _list(db_session, "First")
    second = _list(db_session, "Second")
    ledger.grant(db_session, alice, first)
    ledger.grant(db_session, bob, first)
    ledger.grant(db_session, alice, second)

    assert ledger.revoke_all(db_session, first) == 2
    db_session.commit()

    assert ledger.holders(db_session, first) == []
    assert ledger.holders(db_session, second) == [alice]


def test_regrant_after_revoke_in_same_transaction(db_session, alice):
    ledger = AccessLedger(UserListAccess)
    list_id = _list(db_session)
    ledger.grant(db_session, alice, list_id)

    ledger.revoke_all(db_session, list_id)
    assert ledger.grant(db_session, alice, list_id) is True
    db_session.commit()

    assert ledger.holders(db_session, list_id) == [alice]


def test_granted_among(db_session, alice):
    ledger = AccessLedger(UserListAccess)
    a = _list(db_session, "A")
    b = _list(db_session, "B")
    ledger.grant(db_session, alice, a)

    assert ledger.granted_among(db_session, alice, [a, b]) == {a}
    assert ledger.granted_among(db_session, None, [a, b]) == set()
    assert ledger.granted_among(db_session, alice, []) == set()
