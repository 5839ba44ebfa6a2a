# kioskscan/core/errors.py
"""
Error taxonomy for discovery and reconciliation.

Per-item failures never surface as exceptions; only the outermost entry
points (capability listing, orchestrator runs, planner batches) raise a
``DiscoveryError`` describing the first fatal failure.
"""
from __future__ import annotations

from typing import Any


class DiscoveryError(Exception):
    """Top-level discovery failure with a machine-readable code."""

    def __init__(
        self,
        message: str,
        code: str = "DISCOVERY_ERROR",
        context: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "context": self.context,
        }

    def __str__(self) -> str:
        return self.message


class ValidationError(DiscoveryError):
    """Raised when a caller supplies a malformed address or object id."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message,
            "VALIDATION_ERROR",
            {"field": field} if field else None,
        )
        self.field = field


class RateLimitError(DiscoveryError):
    """The remote node throttled the request (HTTP 429)."""

    def __init__(self, message: str = "Rate limit exceeded"):
        super().__init__(message, "RATE_LIMIT")
