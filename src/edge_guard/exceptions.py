"""Custom exceptions for the edge_guard package."""

from __future__ import annotations


class GuardError(Exception):
    """Base exception for all edge_guard errors."""


class GuardConfigError(GuardError):
    """Raised when a guard is misconfigured."""

    def __init__(self, guard_name: str, message: str) -> None:
        self.guard_name = guard_name
        super().__init__(f"Guard '{guard_name}' misconfigured: {message}")


class StoreError(GuardError):
    """Raised when a store operation fails."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        msg = f"Store error during '{operation}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
