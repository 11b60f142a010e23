#!/usr/bin/env python3
"""
Error types for formhook.

Only configuration problems are raised. Transport failures are captured into
``DispatchResult.error`` and exceptions from result callbacks propagate as-is.
"""

from typing import Optional


class FormhookError(Exception):
    """Base exception for formhook-specific errors."""

    pass


class MalformedConfigurationError(FormhookError):
    """Raised when a handler configuration document has the wrong shape."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class DuplicateCallbackError(FormhookError):
    """Raised when two different classes claim the same callback identifier."""

    pass
