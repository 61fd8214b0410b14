from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

from poe_puppet.config import PuppetConfig
from poe_puppet.errors import NavigationError, NotRunningError, WaitTimeoutError
from poe_puppet.selectors import DEFAULT_SELECTORS

ROOT_URL = "https://poe.com/"
GREETING_REPLY = "Hi there! How can I help you today?"


class FakeElement:
    """Just enough of an element handle for the components under test."""

    def __init__(
        self,
        text: Optional[str] = "",
        children: Optional[Dict[str, "FakeElement"]] = None,
        on_click: Optional[Callable[[], None]] = None,
        visible: bool = True,
    ) -> None:
        self.text = text
        self.children = children or {}
        self.on_click = on_click
        self.visible = visible
        self.typed: List[tuple] = []
        self.clicks = 0

    def text_content(self) -> Optional[str]:
        return self.text

    def query_selector(self, selector: str) -> Optional["FakeElement"]:
        return self.children.get(selector)

    def is_visible(self) -> bool:
        return self.visible

    def type(self, text: str, delay: float = 0) -> None:
        self.typed.append((text, delay))

    def click(self) -> None:
        self.clicks += 1
        if self.on_click:
            self.on_click()


class FakeTransport:
    """In-memory chat page following the default selectors.

    Knobs:
      locations       URLs reported after each navigate (last one repeats)
      reply           text appended to the transcript after a submit
      busy_appears    whether the busy indicator shows up after a submit
      busy_stuck      whether the busy indicator never goes away
      busy_flashes    visibility of the indicator on each post-idle recheck
    """

    def __init__(self, agents: Optional[List[str]] = None, messages: Optional[List[str]] = None) -> None:
        self.selectors = DEFAULT_SELECTORS
        self.running = False
        self.executable_path = "/usr/bin/chromium"
        self.locations = [ROOT_URL]
        self.location = "about:blank"
        self.messages: List[str] = list(messages or [])
        self.reply: Optional[str] = GREETING_REPLY
        self.busy_appears = True
        self.busy_stuck = False
        self.busy_flashes: List[bool] = []
        self.busy_visible = False
        self.navigation_fails = False
        self.has_input = True
        self.has_submit = True
        self.has_clear = True
        self.events: List[str] = []
        self.waits: List[tuple] = []
        self.pauses: List[float] = []
        self.selected: List[FakeElement] = []

        self.input = FakeElement()
        self.submit = FakeElement(on_click=self._on_submit)
        self.clear_button = FakeElement(on_click=self.messages.clear)
        self.cards = [self.make_card(name) for name in (agents if agents is not None else [])]

    def make_card(self, name: Optional[str]) -> FakeElement:
        children = {} if name is None else {self.selectors.agent_label: FakeElement(text=name)}
        return FakeElement(children=children)

    # lifecycle -----------------------------------------------------------------
    @property
    def is_running(self) -> bool:
        return self.running

    def start(self):
        self.events.append("start")
        self.running = True
        return self

    def shutdown(self) -> None:
        if not self.running:
            raise NotRunningError("Could not find browser to close.", operation="shutdown")
        self.events.append("shutdown")
        self.running = False

    def navigate(self, url: str) -> None:
        self.events.append(f"navigate:{url}")
        self.location = self.locations.pop(0) if len(self.locations) > 1 else self.locations[0]

    def current_location(self) -> str:
        return self.location

    # dom -----------------------------------------------------------------------
    def query_selector(self, selector: str) -> Optional[FakeElement]:
        sel = self.selectors
        if selector == sel.input_field:
            return self.input if self.has_input else None
        if selector == sel.submit_control:
            return self.submit if self.has_submit else None
        if selector == sel.clear_control:
            return self.clear_button if self.has_clear else None
        if selector == sel.busy_indicator:
            visible = self.busy_flashes.pop(0) if self.busy_flashes else self.busy_visible
            return FakeElement(visible=visible) if visible else None
        return None

    def query_selector_all(self, selector: str) -> List[FakeElement]:
        if selector == self.selectors.agent_card:
            return list(self.cards)
        if selector == self.selectors.message_row:
            return [FakeElement(text=message) for message in self.messages]
        return []

    def wait_for(self, selector: str, *, visible: bool = True, timeout: float) -> None:
        self.waits.append((selector, visible, timeout))
        if selector != self.selectors.busy_indicator:
            return
        if visible:
            if not self.busy_appears:
                raise WaitTimeoutError("timed out", operation="wait_for", selector=selector)
            self.busy_visible = True
            return
        if self.busy_stuck:
            raise WaitTimeoutError("timed out", operation="wait_for", selector=selector)
        self.busy_visible = False

    def read_text(self, element: FakeElement, child: Optional[str] = None) -> str:
        target = element.query_selector(child) if child else element
        return (target.text_content() or "") if target else ""

    def is_visible(self, element: FakeElement) -> bool:
        return element.is_visible()

    def dispatch_type(self, element: FakeElement, text: str, pacing_ms: float) -> None:
        self.events.append(f"type:{text}")
        element.type(text, delay=pacing_ms)

    def dispatch_click(self, element: FakeElement) -> None:
        self.events.append("click")
        element.click()

    def click_and_wait_for_navigation(self, element: FakeElement, timeout: float) -> None:
        if self.navigation_fails:
            raise NavigationError("timed out", operation="click_and_wait_for_navigation")
        element.click()
        self.selected.append(element)

    def pause(self, ms: float) -> None:
        self.pauses.append(ms)

    def _on_submit(self) -> None:
        typed = "".join(text for text, _ in self.input.typed)
        if typed:
            self.messages.append(typed)
        if self.reply is not None:
            self.messages.append(f"\n  {self.reply}  \n")


@pytest.fixture
def config(tmp_path: Path) -> PuppetConfig:
    return PuppetConfig(
        user_data_dir=tmp_path / "profile",
        writing_speed=10,
        handoff_backoff=0,
        settle_ms=0,
        max_login_handoffs=2,
    )


@pytest.fixture
def transport() -> FakeTransport:
    fake = FakeTransport(agents=["Assistant", "Helper", "Assistant"])
    fake.start()
    return fake


@pytest.fixture
def make_transport():
    def factory(agents=None, messages=None, started=True) -> FakeTransport:
        fake = FakeTransport(agents=agents, messages=messages)
        if started:
            fake.start()
        return fake

    return factory
