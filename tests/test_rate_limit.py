"""
Test the login attempt window
"""

from app.core.rate_limit import LoginAttemptStore, minutes_until


def test_sixth_attempt_is_blocked():
    store = LoginAttemptStore()

    assert [store.hit("ada@example.com") for _ in range(5)] == [None] * 5
    assert store.hit("ada@example.com") == 15


def test_blocked_attempts_keep_counting():
    store = LoginAttemptStore(max_attempts=2)
    for _ in range(4):
        store.hit("ada@example.com")

    assert store.hit("ada@example.com") is not None


def test_minutes_left_rounds_up():
    assert minutes_until(1000.0 + 60 * 14 + 1, 1000.0) == 15
    assert minutes_until(1000.0 + 59, 1000.0) == 1
    assert minutes_until(1000.0 + 7 * 60, 1000.0) == 7


def test_minutes_left_never_below_one():
    assert minutes_until(1000.0, 1000.0) == 1
    assert minutes_until(990.0, 1000.0) == 1


def test_reset_opens_the_window():
    store = LoginAttemptStore(max_attempts=1)
    store.hit("ada@example.com")
    assert store.hit("ada@example.com") is not None

    store.reset("ada@example.com")
    assert store.hit("ada@example.com") is None


def test_keys_are_independent():
    store = LoginAttemptStore(max_attempts=1)

    assert store.hit("ada@example.com") is None
    assert store.hit("ada@example.com") is not None
    assert store.hit("grace@example.com") is None


def test_stores_do_not_share_counts():
    first = LoginAttemptStore(max_attempts=1)
    second = LoginAttemptStore(max_attempts=1)
    first.hit("ada@example.com")

    assert second.hit("ada@example.com") is None
