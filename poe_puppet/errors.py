"""Error taxonomy for the puppet.

Every error carries the operation that detected it and, when a DOM lookup is
involved, the selector that failed. That is usually enough to tell a markup
change on the target site apart from a genuine network or timeout problem.
"""

from __future__ import annotations

from typing import Optional


class PuppetError(Exception):
    """Base class for all puppet failures."""

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        selector: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.selector = selector

    def __str__(self) -> str:
        parts = [self.message]
        if self.operation:
            parts.append(f"operation={self.operation}")
        if self.selector:
            parts.append(f"selector={self.selector!r}")
        return " | ".join(parts)


class LaunchError(PuppetError):
    """Browser could not be launched or exposed no page."""


class NavigationError(PuppetError):
    """A navigation did not settle in time."""


class WaitTimeoutError(PuppetError, TimeoutError):
    """A wait condition was not met before its timeout."""


class IndicatorAppearTimeoutError(WaitTimeoutError):
    """The busy indicator never showed up after submitting."""


class IndicatorDisappearTimeoutError(WaitTimeoutError):
    """The busy indicator showed up but never went away."""


class InteractionError(PuppetError):
    """The page refused a DOM operation (detached element, closed target, ...)."""


class ElementNotFoundError(PuppetError):
    """A required element is absent from the page."""


class InputNotFoundError(ElementNotFoundError):
    pass


class SubmitControlNotFoundError(ElementNotFoundError):
    pass


class ClearControlNotFoundError(ElementNotFoundError):
    pass


class AgentNotFoundError(ElementNotFoundError):
    """No directory entry carries the requested label."""

    def __init__(self, name: str, **kwargs) -> None:
        super().__init__(f'Could not find chatbot: "{name}".', **kwargs)
        self.name = name


class NotRunningError(PuppetError):
    """Shutdown requested but no browser is owned."""


class LoginAbortedError(PuppetError):
    """Manual login hand-offs were exhausted without an authenticated session."""


class SessionNotReadyError(PuppetError):
    """The session is not authenticated or has no active agent."""
