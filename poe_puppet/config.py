"""
Puppet Configuration
====================

Plain values consumed at session creation. Everything can be overridden
through ``POE_PUPPET_*`` environment variables or a ``.env`` file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

LOG = logging.getLogger(__name__)

ENV_PREFIX = "POE_PUPPET_"
PROFILES_ROOT = Path("profiles")
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class PuppetConfig:
    """Configuration for one puppet session."""

    base_url: str = "https://poe.com"

    # Browser
    headless: bool = True
    user_data_dir: Path = field(default_factory=lambda: PROFILES_ROOT / "poe")
    browser_path: Optional[str] = None  # None means Playwright's bundled Chromium
    wait_until: str = "load"

    # Pacing and timing
    writing_speed: int = 10  # ms per typed character
    delay_factor: float = 1.0  # multiplies every timeout below
    navigation_timeout: float = 30.0
    indicator_timeout: float = 15.0
    response_timeout: float = 120.0
    settle_ms: int = 500
    max_idle_rechecks: int = 3

    # Login hand-off
    max_login_handoffs: int = 3
    handoff_backoff: float = 2.0

    # Conversation
    chatbot: str = "Assistant"

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    def __post_init__(self) -> None:
        self.user_data_dir = Path(self.user_data_dir).expanduser()
        if self.log_file is not None:
            self.log_file = Path(self.log_file).expanduser()
        if self.delay_factor <= 0:
            raise ValueError(f"delay_factor must be positive, got {self.delay_factor}")
        if self.writing_speed < 0:
            raise ValueError(f"writing_speed must not be negative, got {self.writing_speed}")
        if self.max_login_handoffs < 0:
            raise ValueError(f"max_login_handoffs must not be negative, got {self.max_login_handoffs}")

    def timeout_ms(self, seconds: float) -> float:
        """Scale a base timeout by ``delay_factor`` and convert it for Playwright."""
        return seconds * self.delay_factor * 1000.0

    def with_overrides(self, **overrides) -> PuppetConfig:
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self

    @classmethod
    def from_env(cls, dotenv_path: Optional[Path] = None) -> PuppetConfig:
        """Load configuration from ``.env`` and the process environment."""
        load_dotenv(dotenv_path)
        defaults = cls()

        return cls(
            base_url=_env_str("BASE_URL", defaults.base_url),
            headless=_env_flag("HEADLESS", defaults.headless),
            user_data_dir=Path(_env_str("PROFILE_DIR", str(defaults.user_data_dir))),
            browser_path=_env_str("BROWSER_PATH", None),
            wait_until=_env_str("WAIT_UNTIL", defaults.wait_until),
            writing_speed=int(_env_str("WRITING_SPEED", str(defaults.writing_speed))),
            delay_factor=float(_env_str("DELAY_FACTOR", str(defaults.delay_factor))),
            navigation_timeout=float(_env_str("NAVIGATION_TIMEOUT", str(defaults.navigation_timeout))),
            indicator_timeout=float(_env_str("INDICATOR_TIMEOUT", str(defaults.indicator_timeout))),
            response_timeout=float(_env_str("RESPONSE_TIMEOUT", str(defaults.response_timeout))),
            settle_ms=int(_env_str("SETTLE_MS", str(defaults.settle_ms))),
            max_login_handoffs=int(_env_str("MAX_LOGIN_HANDOFFS", str(defaults.max_login_handoffs))),
            handoff_backoff=float(_env_str("HANDOFF_BACKOFF", str(defaults.handoff_backoff))),
            chatbot=_env_str("CHATBOT", defaults.chatbot),
            log_level=_env_str("LOG_LEVEL", defaults.log_level).upper(),
            log_file=_env_path("LOG_FILE"),
        )


def _env_str(name: str, default: Optional[str]) -> Optional[str]:
    value = os.environ.get(f"{ENV_PREFIX}{name}")
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_path(name: str) -> Optional[Path]:
    value = _env_str(name, None)
    return Path(value) if value else None


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(f"{ENV_PREFIX}{name}")
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    LOG.warning("Unrecognized %s%s value '%s', keeping default %s", ENV_PREFIX, name, value, default)
    return default
