"""Temporary single-use login tokens."""

from core.tokens import TempTokenStore


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_token_redeems_once():
    store = TempTokenStore(ttl_seconds=60, clock=FakeClock())
    token = store.issue("user-1")

    assert store.redeem(token) == "user-1"
    assert store.redeem(token) is None


def test_token_expires():
    clock = FakeClock()
    store = TempTokenStore(ttl_seconds=60, clock=clock)
    token = store.issue("user-1")

    clock.now += 61
    assert store.redeem(token) is None
    # expired tokens are dropped, not kept around
    assert len(store) == 0


def test_token_valid_until_ttl():
    clock = FakeClock()
    store = TempTokenStore(ttl_seconds=60, clock=clock)
    token = store.issue("user-1")

    clock.now += 59
    assert store.redeem(token) == "user-1"


def test_unknown_token():
    store = TempTokenStore(ttl_seconds=60)
    assert store.redeem("nope") is None


def test_issue_purges_expired_entries():
    clock = FakeClock()
    store = TempTokenStore(ttl_seconds=60, clock=clock)
    store.issue("user-1")
    store.issue("user-2")

    clock.now += 120
    store.issue("user-3")
    assert len(store) == 1


def test_tokens_are_unique():
    store = TempTokenStore(ttl_seconds=60)
    tokens = {store.issue("user-1") for _ in range(50)}
    assert len(tokens) == 50
