"""Client identity extraction for rate limiting."""

from __future__ import annotations

from collections.abc import Mapping

UNKNOWN_CLIENT = "unknown"


def client_ip(headers: Mapping[str, str]) -> str:
    """Return the originating client address from proxy headers.

    Checks ``cf-connecting-ip``, then the first entry of ``x-forwarded-for``,
    then ``x-real-ip``.  Header names are matched case-insensitively.
    Returns ``"unknown"`` when none is present, so all such clients share one
    rate-limit window.
    """
    lowered = {name.lower(): value for name, value in headers.items()}

    cf_ip = lowered.get("cf-connecting-ip", "").strip()
    if cf_ip:
        return cf_ip

    forwarded = lowered.get("x-forwarded-for", "")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = lowered.get("x-real-ip", "").strip()
    if real_ip:
        return real_ip

    return UNKNOWN_CLIENT
