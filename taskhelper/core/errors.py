"""Shared error types.

Errors raised at configuration time (bad interval, bad timeout) are explicit;
errors raised inside a background task never cross into the caller's thread.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class AppError(Exception):
    """Base error for task helper failures."""

    message: str
    cause: Exception | None = None

    def __str__(self) -> str:  # pragma: no cover
        if self.cause is None:
            return self.message
        return f"{self.message} (cause: {self.cause})"


class DomainError(AppError):
    """Lifecycle rule violation (e.g. waiting on a task from its own thread)."""


class ValidationError(AppError):
    """Invalid argument or configuration value."""


class CancelledError(AppError):
    """Cooperative cancellation observed by a task body."""
