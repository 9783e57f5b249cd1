"""Structured parsing/configuration errors for breakpoint planning."""

from __future__ import annotations
from typing import Any


class PlannerError(Exception):
    """Base class for every error raised while planning image breakpoints."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ParseError(PlannerError, ValueError):
    """Raised for a malformed sizing expression, media type or unit."""


class ConfigurationError(PlannerError):
    """Raised when inputs are well-formed but cannot be planned with."""


class UnhandledFeatureError(ConfigurationError):
    """Raised when a media feature/value combination cannot be evaluated."""
