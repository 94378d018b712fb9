"""Exception hierarchy for the workshop suites.

Verification failures use the builtin ``TimeoutError`` and ``AssertionError``
so pytest reports them the usual way. Remote comparison outcomes are never
raised; they are collected as data by the visual runner.
"""

from __future__ import annotations


class WorkshopError(Exception):
    """Base class for workshop errors."""


class SessionStartError(WorkshopError):
    """The local browser could not be started (missing or mismatched binary)."""


class ElementNotFoundError(WorkshopError):
    """A locator resolved to zero elements within the implicit wait."""

    def __init__(self, selector: str, timeout_seconds: float):
        self.selector = selector
        self.timeout_seconds = timeout_seconds
        super().__init__(f"No element matching '{selector}' within {timeout_seconds:g}s")


class AuthenticationError(WorkshopError):
    """The visual testing credential is missing."""


class ConfigurationError(WorkshopError):
    """The run configuration cannot be translated for the visual service."""


class VisualSessionError(WorkshopError):
    """The visual client was used out of order (e.g. check before open)."""
