"""Utilities for launching Chromium against a persistent profile.

Two ways in: an automated Playwright context the puppet drives, and a plain
browser process a human drives to sign in. Both share the same profile
directory, so never run them at the same time.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional, Tuple

from playwright.sync_api import BrowserContext, Page, Playwright, sync_playwright
from playwright.sync_api import Error as PWError

from poe_puppet.errors import LaunchError

LOG = logging.getLogger(__name__)


def launch_persistent(
    profile_dir: Path,
    *,
    headless: bool = True,
    executable_path: Optional[str] = None,
) -> Tuple[Playwright, BrowserContext, Page]:
    """Launch a persistent Chromium context backed by ``profile_dir``.

    Parameters
    ----------
    profile_dir:
        Directory that stores Chromium profile state (cookies, localStorage,
        session data, etc.). Created when missing so repeated runs reuse the
        same login.
    headless:
        Whether to launch Chromium in headless mode.
    executable_path:
        Browser binary to drive. ``None`` uses Playwright's bundled Chromium.

    Raises ``LaunchError`` when Playwright fails to start the browser or the
    context comes up without a page.
    """

    profile_path = Path(profile_dir)
    profile_path.mkdir(parents=True, exist_ok=True)

    playwright = sync_playwright().start()
    try:
        context = playwright.chromium.launch_persistent_context(
            str(profile_path),
            headless=headless,
            executable_path=executable_path,
            no_viewport=True,
        )
    except PWError as exc:
        playwright.stop()
        raise LaunchError(f"Browser failed to launch: {exc}", operation="start") from exc

    if not context.pages:
        shutdown(playwright, context)
        raise LaunchError("No browser pages found after launch", operation="start")

    return playwright, context, context.pages[0]


def shutdown(playwright: Optional[Playwright], context: Optional[BrowserContext]) -> None:
    """Gracefully dispose of Playwright resources used by ``launch_persistent``."""

    try:
        if context:
            context.close()
    finally:
        if playwright:
            playwright.stop()


def launch_manual_browser(executable_path: str, profile_dir: Path, url: str) -> int:
    """Open a regular, visible browser on ``url`` and block until it exits.

    The window is not under automation, so the user can complete whatever
    login flow the site presents. Returns the process exit code.
    """

    arguments = [
        executable_path,
        f"--user-data-dir={Path(profile_dir).resolve()}",
        url,
    ]
    LOG.debug("Starting browser with arguments: %s", arguments)
    try:
        completed = subprocess.run(arguments, check=False)
    except OSError as exc:
        raise LaunchError(
            f"Could not start browser for manual login: {exc}", operation="manual_login"
        ) from exc
    LOG.debug("Manual browser exited with code %s", completed.returncode)
    return completed.returncode
