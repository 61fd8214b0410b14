"""Authentication gate.

The site has no programmatic login. All the gate can do is navigate to the
service root, see whether it got bounced to the login page, and if so hand
the profile to a human in a normal browser window. The automated browser is
closed before that window opens so the two never share the profile at once.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from poe_puppet._profile_launch import launch_manual_browser
from poe_puppet.config import PuppetConfig
from poe_puppet.errors import LoginAbortedError
from poe_puppet.models import AuthStatus, GateState
from poe_puppet.selectors import DEFAULT_SELECTORS, ChatSelectors

LOG = logging.getLogger(__name__)


class AuthenticationGate:
    def __init__(
        self,
        transport,
        config: PuppetConfig,
        selectors: ChatSelectors = DEFAULT_SELECTORS,
        handoff: Callable[..., int] = launch_manual_browser,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.transport = transport
        self.config = config
        self.selectors = selectors
        self._handoff = handoff
        self._sleep = sleep
        self.state = GateState.UNKNOWN
        self.status = AuthStatus.UNKNOWN
        self.handoffs = 0

    def run(self) -> AuthStatus:
        """Drive the gate until the session is authenticated.

        Raises ``LoginAbortedError`` once ``max_login_handoffs`` manual logins
        have been attempted without reaching an authenticated page.
        """
        self.handoffs = 0
        while True:
            self.state = GateState.UNKNOWN
            self.status = AuthStatus.UNKNOWN
            if not self.transport.is_running:
                self.transport.start()

            LOG.debug("Navigating to %s", self.config.base_url)
            self.transport.navigate(self.config.base_url)
            self.state = GateState.PROBING_LOGIN

            location = self.transport.current_location()
            if not self.selectors.is_login_location(location, self.config.base_url):
                self.state = GateState.AUTHENTICATED
                self.status = AuthStatus.AUTHENTICATED
                LOG.info("User is signed in to %s", self.config.base_url)
                return self.status

            self.status = AuthStatus.UNAUTHENTICATED
            if self.handoffs >= self.config.max_login_handoffs:
                self.transport.shutdown()
                raise LoginAbortedError(
                    f"Still not logged in after {self.handoffs} manual login attempt(s)",
                    operation="authenticate",
                )

            self.state = GateState.AWAITING_HUMAN
            self._hand_off_to_human()
            self.handoffs += 1
            if self.config.handoff_backoff > 0:
                self._sleep(self.config.handoff_backoff)

    def _hand_off_to_human(self) -> None:
        executable = require_executable(self.transport.executable_path)
        # the profile must be free before the manual browser can use it
        self.transport.shutdown()
        LOG.info(
            "Not logged in to %s, closing the automated browser and opening a normal one for sign in.",
            self.config.base_url,
        )
        LOG.info("Please log in manually in the new browser. Close the browser when you are signed in to continue.")
        self._handoff(executable, self.config.user_data_dir, self.config.base_url)
        LOG.debug("Browser closed, probing login state again")

    @property
    def authenticated(self) -> bool:
        return self.status is AuthStatus.AUTHENTICATED


def require_executable(path: Optional[str]) -> str:
    if not path:
        raise LoginAbortedError("No browser executable available for manual login", operation="authenticate")
    return path
