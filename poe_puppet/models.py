from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List


class AuthStatus(str, Enum):
    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class GateState(str, Enum):
    UNKNOWN = "unknown"
    PROBING_LOGIN = "probing_login"
    AWAITING_HUMAN = "awaiting_human"
    AUTHENTICATED = "authenticated"


class ChannelState(str, Enum):
    IDLE = "idle"
    COMPOSING = "composing"
    SUBMITTED = "submitted"
    PROCESSING = "processing"
    COMPLETE = "complete"
    FAILED = "failed"


# a directory entry as seen on the live page. the handle goes stale on the
# next navigation, so never keep one around across agent switches.
@dataclass
class Agent:
    name: str
    handle: Any = field(default=None, repr=False, compare=False)


@dataclass
class SendResult:
    text: str
    states: List[ChannelState] = field(default_factory=list)
    elapsed: float = 0.0
