"""Session transport: one browser, one page, a handful of DOM primitives."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional

from playwright.sync_api import ElementHandle
from playwright.sync_api import Error as PWError
from playwright.sync_api import TimeoutError as PWTimeoutError

from poe_puppet._profile_launch import launch_persistent, shutdown as shutdown_persistent
from poe_puppet.config import PuppetConfig
from poe_puppet.errors import (
    InteractionError,
    LaunchError,
    NavigationError,
    NotRunningError,
    WaitTimeoutError,
)

LOG = logging.getLogger(__name__)


class SessionTransport:
    """Owns the automated browser context and its first page.

    Every other component talks to the page through this class, which also
    translates Playwright failures into the puppet's own errors.
    """

    def __init__(
        self,
        config: PuppetConfig,
        launcher: Callable[..., Any] = launch_persistent,
        closer: Callable[..., None] = shutdown_persistent,
    ) -> None:
        self.config = config
        self._launcher = launcher
        self._closer = closer
        self._playwright = None
        self._context = None
        self._page = None
        self.executable_path: Optional[str] = config.browser_path

    @property
    def is_running(self) -> bool:
        return self._context is not None

    @property
    def page(self):
        if self._page is None:
            raise NotRunningError("Could not find browser page, forgot to start()?")
        return self._page

    def start(self) -> SessionTransport:
        if self.is_running:
            raise LaunchError("Browser already running for this session", operation="start")

        LOG.debug(
            "Starting browser %s with user data dir %s",
            self.config.browser_path or "<bundled chromium>",
            self.config.user_data_dir,
        )
        self._playwright, self._context, self._page = self._launcher(
            self.config.user_data_dir,
            headless=self.config.headless,
            executable_path=self.config.browser_path,
        )
        if not self.executable_path:
            self.executable_path = self._playwright.chromium.executable_path
        return self

    def navigate(self, url: str) -> None:
        LOG.debug("Navigating to %s", url)
        try:
            self.page.goto(
                url,
                wait_until=self.config.wait_until,
                timeout=self.config.timeout_ms(self.config.navigation_timeout),
            )
        except PWTimeoutError as exc:
            raise NavigationError(f"Navigation to {url} timed out", operation="navigate") from exc
        except PWError as exc:
            raise NavigationError(f"Navigation to {url} failed: {exc}", operation="navigate") from exc

    def current_location(self) -> str:
        return self.page.url

    def query_selector(self, selector: str) -> Optional[ElementHandle]:
        with _page_errors("query_selector", selector):
            return self.page.query_selector(selector)

    def query_selector_all(self, selector: str) -> List[ElementHandle]:
        with _page_errors("query_selector_all", selector):
            return self.page.query_selector_all(selector)

    def wait_for(self, selector: str, *, visible: bool = True, timeout: float) -> None:
        """Block until ``selector`` is visible (or hidden). ``timeout`` is in ms."""
        state = "visible" if visible else "hidden"
        try:
            self.page.wait_for_selector(selector, state=state, timeout=timeout)
        except PWTimeoutError as exc:
            raise WaitTimeoutError(
                f"Element did not become {state} within {timeout:.0f}ms",
                operation="wait_for",
                selector=selector,
            ) from exc
        except PWError as exc:
            raise InteractionError(
                f"Waiting for element to become {state} failed: {_first_line(exc)}",
                operation="wait_for",
                selector=selector,
            ) from exc

    def read_text(self, element: ElementHandle, child: Optional[str] = None) -> str:
        """Text content of ``element`` (or of its first ``child`` match), ``""`` if absent."""
        with _page_errors("read_text", child):
            target = element.query_selector(child) if child else element
            return (target.text_content() or "") if target else ""

    def is_visible(self, element: ElementHandle) -> bool:
        with _page_errors("is_visible"):
            return element.is_visible()

    def dispatch_type(self, element: ElementHandle, text: str, pacing_ms: float) -> None:
        with _page_errors("dispatch_type"):
            element.type(text, delay=pacing_ms)

    def dispatch_click(self, element: ElementHandle) -> None:
        with _page_errors("dispatch_click"):
            element.click()

    def click_and_wait_for_navigation(self, element: ElementHandle, timeout: float) -> None:
        """Click ``element`` and wait for the resulting navigation to go network idle.

        A click that fails raises ``InteractionError``; only the navigation
        itself is reported as ``NavigationError``.
        """
        try:
            with self.page.expect_navigation(wait_until="networkidle", timeout=timeout):
                with _page_errors("click_and_wait_for_navigation"):
                    element.click(timeout=timeout)
        except PWTimeoutError as exc:
            raise NavigationError(
                f"Navigation after click did not settle within {timeout:.0f}ms",
                operation="click_and_wait_for_navigation",
            ) from exc
        except PWError as exc:
            raise NavigationError(
                f"Navigation after click failed: {_first_line(exc)}",
                operation="click_and_wait_for_navigation",
            ) from exc

    def pause(self, ms: float) -> None:
        with _page_errors("pause"):
            self.page.wait_for_timeout(ms)

    def shutdown(self) -> None:
        if not self.is_running:
            raise NotRunningError("Could not find browser to close.", operation="shutdown")
        LOG.debug("Closing automated browser")
        try:
            self._closer(self._playwright, self._context)
        finally:
            self._playwright = None
            self._context = None
            self._page = None


def _first_line(exc: BaseException) -> str:
    # playwright appends a multi-line call log to its messages
    text = str(exc).strip()
    return text.splitlines()[0] if text else type(exc).__name__


@contextmanager
def _page_errors(operation: str, selector: Optional[str] = None) -> Iterator[None]:
    try:
        yield
    except PWError as exc:
        raise InteractionError(
            f"Page rejected {operation}: {_first_line(exc)}",
            operation=operation,
            selector=selector,
        ) from exc
