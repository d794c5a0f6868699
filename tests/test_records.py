"""Tests for persisted record shapes."""

from edge_guard.records import CacheEntry, LockoutState, RateWindow


def test_wire_names_are_camel_case():
    assert RateWindow(count=1, window_start=5).dump() == {"count": 1, "windowStart": 5}
    assert LockoutState(failed_attempts=2, last_failure=7).dump() == {
        "failedAttempts": 2,
        "lastFailure": 7,
        "lockedUntil": None,
    }
    assert CacheEntry(value="1.00", cached_at=9).dump() == {"value": "1.00", "cachedAt": 9}


def test_parse_reads_wire_names():
    state = LockoutState.parse({"failedAttempts": 3, "lastFailure": 1, "lockedUntil": 100})
    assert state is not None
    assert state.locked_until == 100
    assert state.is_locked_at(99)
    assert not state.is_locked_at(100)


def test_parse_rejects_malformed():
    assert RateWindow.parse(None) is None
    assert RateWindow.parse("count=1") is None
    assert RateWindow.parse({"count": -1, "windowStart": 0}) is None
    assert CacheEntry.parse({"value": "x"}) is None
