"""Exception types raised by bumpstat setup and configuration.

Metric operations themselves never raise; these only surface from
``load_config`` and ``init``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class BumpstatError(Exception):
    """Base error carrying an optional ``details`` mapping."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class ConfigError(BumpstatError):
    """Configuration could not be loaded or is invalid."""


class ValidationError(ConfigError):
    """A configuration model rule was violated."""
