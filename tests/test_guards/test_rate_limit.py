"""Tests for RateLimiter."""

import logging

import pytest

from edge_guard import GuardConfigError, LockoutConfig, RateLimitConfig, RateLimiter


@pytest.fixture
def rl(store, clock):
    return RateLimiter(store, RateLimitConfig(max_requests=3, window_seconds=60), clock=clock)


async def test_allows_under_limit(rl):
    for _ in range(3):
        assert await rl.check_and_consume("9.9.9.9")


async def test_denies_over_limit(rl):
    for _ in range(3):
        await rl.check_and_consume("9.9.9.9")
    assert not await rl.check_and_consume("9.9.9.9")


async def test_example_scenario(rl, store, clock):
    counts = []
    for _ in range(3):
        assert await rl.check_and_consume("9.9.9.9")
        counts.append((await store.get("rate:9.9.9.9"))["count"])
        clock.advance(1)
    assert counts == [1, 2, 3]

    # t=3
    assert not await rl.check_and_consume("9.9.9.9")

    clock.advance(58)  # t=61
    assert await rl.check_and_consume("9.9.9.9")
    assert (await store.get("rate:9.9.9.9"))["count"] == 1


async def test_window_preserves_start(rl, store, clock):
    await rl.check_and_consume("1.2.3.4")
    start = (await store.get("rate:1.2.3.4"))["windowStart"]
    clock.advance(10)
    await rl.check_and_consume("1.2.3.4")
    assert await store.get("rate:1.2.3.4") == {"count": 2, "windowStart": start}


async def test_denial_does_not_write(rl, store, clock):
    for _ in range(3):
        await rl.check_and_consume("1.2.3.4")
    before = await store.get("rate:1.2.3.4")
    clock.advance(5)
    assert not await rl.check_and_consume("1.2.3.4")
    assert await store.get("rate:1.2.3.4") == before


async def test_expired_window_resets_even_if_record_survives(store, clock):
    # TTL far beyond the window, so the record is still physically present
    await store.put("rate:5.5.5.5", {"count": 3, "windowStart": clock.now_ms()}, ttl_seconds=3600)
    rl = RateLimiter(store, RateLimitConfig(max_requests=3, window_seconds=60), clock=clock)

    assert not await rl.check_and_consume("5.5.5.5")
    clock.advance(61)
    assert await rl.check_and_consume("5.5.5.5")
    record = await store.get("rate:5.5.5.5")
    assert record == {"count": 1, "windowStart": clock.now_ms()}


async def test_ttl_is_window_length(rl, store):
    await rl.check_and_consume("1.2.3.4")
    await rl.check_and_consume("1.2.3.4")
    assert store.ttls["rate:1.2.3.4"] == 60


async def test_per_client_isolation(rl):
    for _ in range(3):
        await rl.check_and_consume("1.1.1.1")

    assert not await rl.check_and_consume("1.1.1.1")
    assert await rl.check_and_consume("2.2.2.2")


async def test_zero_limit_denies_everything(store, clock):
    rl = RateLimiter(store, RateLimitConfig(max_requests=0, window_seconds=60), clock=clock)
    assert not await rl.check_and_consume("1.2.3.4")
    assert await store.get("rate:1.2.3.4") is None


async def test_malformed_record_starts_fresh(rl, store):
    await store.put("rate:1.2.3.4", {"count": "lots", "windowStart": None})
    assert await rl.check_and_consume("1.2.3.4")
    assert (await store.get("rate:1.2.3.4"))["count"] == 1


async def test_non_object_record_starts_fresh(rl, store):
    await store.put("rate:1.2.3.4", [1, 2, 3])
    assert await rl.check_and_consume("1.2.3.4")
    assert (await store.get("rate:1.2.3.4"))["count"] == 1


# ── fail open ────────────────────────────────────────────────


async def test_no_store_allows(clock):
    rl = RateLimiter(None, RateLimitConfig(max_requests=1, window_seconds=60), clock=clock)
    for _ in range(5):
        assert await rl.check_and_consume("1.2.3.4")


async def test_failing_store_allows(failing_store, clock, caplog):
    rl = RateLimiter(failing_store, RateLimitConfig(max_requests=1, window_seconds=60), clock=clock)
    with caplog.at_level(logging.ERROR):
        for _ in range(5):
            assert await rl.check_and_consume("1.2.3.4")
    assert "store failure during check_and_consume" in caplog.text


async def test_timeout_allows(slow_store, clock, caplog):
    rl = RateLimiter(
        slow_store, RateLimitConfig(max_requests=1, window_seconds=60), clock=clock, timeout=0.01
    )
    with caplog.at_level(logging.ERROR):
        for _ in range(3):
            assert await rl.check_and_consume("1.2.3.4")
    assert "TimeoutError" in caplog.text


# ── config and debug ─────────────────────────────────────────


def test_rejects_wrong_config_type(store):
    with pytest.raises(GuardConfigError):
        RateLimiter(store, LockoutConfig())


def test_rejects_non_positive_timeout(store):
    with pytest.raises(GuardConfigError):
        RateLimiter(store, timeout=0)


def test_default_config(store):
    rl = RateLimiter(store)
    assert rl.config.max_requests == 10
    assert rl.config.window_seconds == 60


async def test_debug_events(rl, caplog):
    with caplog.at_level(logging.DEBUG, logger="edge_guard.guards.rate_limit"):
        await rl.check_and_consume("1.2.3.4", debug=True)
        await rl.check_and_consume("1.2.3.4", debug=True)

    events = [r for r in caplog.records if r.name == "edge_guard.guards.rate_limit"]
    assert [r.event for r in events] == ["Rate limit: new window", "Rate limit: incremented"]
    assert events[-1].count == 2
    assert events[-1].key == "rate:1.2.3.4"


async def test_no_debug_events_by_default(rl, caplog):
    with caplog.at_level(logging.DEBUG, logger="edge_guard.guards.rate_limit"):
        await rl.check_and_consume("1.2.3.4")
    assert not [r for r in caplog.records if r.name == "edge_guard.guards.rate_limit"]


def test_export(rl):
    data = rl.export()
    assert data["type"] == "rate_limit"
    assert data["enabled"] is True
    assert data["config"] == {"max_requests": 3, "window_seconds": 60}
