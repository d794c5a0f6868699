"""
edge_guard — balance endpoint walkthrough

A handler for a balance endpoint: rate limit by client address, refuse
locked accounts, serve from cache when fresh, otherwise ask upstream and
record the outcome.  Run with ``python examples/balance_gateway.py``.
"""

import asyncio

from edge_guard import EdgeGuard, GuardSettings, client_ip
from edge_guard.logging import configure_logging
from edge_guard.stores import InMemoryStore

# ─── Stand-in for the upstream account API ───

ACCOUNTS = {"alice": ("hunter22", "12.34")}


async def fetch_balance(username: str, password: str) -> str | None:
    expected = ACCOUNTS.get(username)
    if expected is None or expected[0] != password:
        return None
    return expected[1]


# ─── The handler ───


async def handle_balance(guard: EdgeGuard, headers: dict, username: str, password: str):
    ip = client_ip(headers)

    if not await guard.rate_limiter.check_and_consume(ip):
        return 429, "Too many requests"

    if await guard.lockout.is_locked(username):
        retry_after = await guard.lockout.remaining_lockout_seconds(username)
        return 429, f"Account temporarily locked, retry in {retry_after}s"

    cached = await guard.cache.get(username)
    if cached is not None:
        return 200, f"USD {cached} (cached)"

    balance = await fetch_balance(username, password)
    if balance is None:
        await guard.lockout.record_failure(username)
        return 401, "Authentication failed"

    await guard.lockout.clear_on_success(username)
    await guard.cache.set(username, balance)
    return 200, f"USD {balance}"


async def main():
    configure_logging(level="INFO", fmt="plain")

    store = InMemoryStore()
    settings = GuardSettings(
        rate_limit_requests=8,
        brute_force_max_attempts=3,
        brute_force_lockout_seconds=60,
        _env_file=None,
    )
    guard = EdgeGuard(security_store=store, cache_store=store, settings=settings)
    headers = {"X-Forwarded-For": "203.0.113.7"}

    print("── good credentials ──")
    print(await handle_balance(guard, headers, "alice", "hunter22"))
    print(await handle_balance(guard, headers, "alice", "hunter22"))

    print("── guessing a password ──")
    for guess in ["123456", "password", "letmein", "hunter22"]:
        print(guess, await handle_balance(guard, headers, "bob", guess))

    print("── hammering the endpoint ──")
    for _ in range(3):
        print(await handle_balance(guard, headers, "alice", "hunter22"))

    print("── security disabled (no store) ──")
    open_guard = EdgeGuard(settings=settings)
    for _ in range(3):
        print(await handle_balance(open_guard, headers, "bob", "nope"))


if __name__ == "__main__":
    asyncio.run(main())
