"""Drive a web chat UI through a Playwright-controlled browser."""

from poe_puppet.config import PuppetConfig
from poe_puppet.errors import (
    AgentNotFoundError,
    ClearControlNotFoundError,
    ElementNotFoundError,
    IndicatorAppearTimeoutError,
    IndicatorDisappearTimeoutError,
    InputNotFoundError,
    InteractionError,
    LaunchError,
    LoginAbortedError,
    NavigationError,
    NotRunningError,
    PuppetError,
    SessionNotReadyError,
    SubmitControlNotFoundError,
    WaitTimeoutError,
)
from poe_puppet.log import configure_logging
from poe_puppet.models import Agent, AuthStatus, ChannelState, GateState, SendResult
from poe_puppet.selectors import ChatSelectors
from poe_puppet.session import PoePuppet

__all__ = [
    "Agent",
    "AgentNotFoundError",
    "AuthStatus",
    "ChannelState",
    "ChatSelectors",
    "ClearControlNotFoundError",
    "ElementNotFoundError",
    "GateState",
    "IndicatorAppearTimeoutError",
    "IndicatorDisappearTimeoutError",
    "InputNotFoundError",
    "InteractionError",
    "LaunchError",
    "LoginAbortedError",
    "NavigationError",
    "NotRunningError",
    "PoePuppet",
    "PuppetConfig",
    "PuppetError",
    "SendResult",
    "SessionNotReadyError",
    "SubmitControlNotFoundError",
    "WaitTimeoutError",
    "configure_logging",
]
