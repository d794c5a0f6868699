"""Tests for client address extraction."""

from edge_guard import client_ip


def test_prefers_cloudflare_header():
    headers = {"CF-Connecting-IP": "1.1.1.1", "X-Forwarded-For": "2.2.2.2", "X-Real-IP": "3.3.3.3"}
    assert client_ip(headers) == "1.1.1.1"


def test_first_forwarded_entry():
    assert client_ip({"x-forwarded-for": " 2.2.2.2 , 10.0.0.1"}) == "2.2.2.2"


def test_real_ip_fallback():
    assert client_ip({"x-forwarded-for": "", "x-real-ip": "3.3.3.3"}) == "3.3.3.3"


def test_unknown():
    assert client_ip({}) == "unknown"
