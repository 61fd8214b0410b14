"""DOM contract of the target chat site.

These strings follow whatever markup poe.com ships this week. Keep every
selector here so a redesign of the site touches one file only.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit


@dataclass(frozen=True)
class ChatSelectors:
    # path the site redirects to when the profile has no session
    login_path: str = "/login"

    agent_card: str = 'div[class*="BotHeader_title"]'
    agent_label: str = "p"

    input_field: str = 'textarea[class^="GrowingTextArea"]'
    submit_control: str = 'button[class*="sendButton"]'
    # only present while a reply is being generated
    busy_indicator: str = "button[class*=ChatStopMessageButton]"

    message_row: str = '[class^="Message_row"]'
    clear_control: str = 'button[class*="ChatBreakButton"]'

    def is_login_location(self, url: str, base_url: str) -> bool:
        """True when ``url`` is the login page of the service rooted at ``base_url``."""
        location = urlsplit(url or "")
        if location.scheme not in ("http", "https"):
            return False
        if _bare_host(location.netloc) != _bare_host(urlsplit(base_url).netloc):
            return False
        return location.path.startswith(self.login_path)


def _bare_host(netloc: str) -> str:
    host = netloc.lower()
    return host[4:] if host.startswith("www.") else host


DEFAULT_SELECTORS = ChatSelectors()
