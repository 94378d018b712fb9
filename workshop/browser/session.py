"""Browser session lifecycle: one Playwright browser per test.

Sessions use Playwright's synchronous API, which is also the page type the
visual testing SDK drives.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from playwright.sync_api import Browser, BrowserContext, Locator, Page, Playwright, sync_playwright
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from workshop.errors import ElementNotFoundError, SessionStartError
from workshop.models.config import ViewportConfig

logger = logging.getLogger(__name__)

IMPLICIT_WAIT_SECONDS = 10

# Browser kinds understood by the workshop, mapped to Playwright engines
ENGINES = {
    "chrome": "chromium",
    "edge": "chromium",
    "firefox": "firefox",
    "safari": "webkit",
}


def engine_for(browser_kind: str) -> str:
    try:
        return ENGINES[browser_kind.lower()]
    except KeyError:
        raise SessionStartError(
            f"Unsupported browser '{browser_kind}' (expected one of: {', '.join(ENGINES)})"
        ) from None


class BrowserSession:
    """A local browser automation session, exclusively owned by one test."""

    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
        implicit_wait_seconds: float = IMPLICIT_WAIT_SECONDS,
    ):
        self.playwright = playwright
        self.browser = browser
        self.context = context
        self.page = page
        self.implicit_wait_seconds = implicit_wait_seconds
        self.closed = False

    @property
    def implicit_wait_ms(self) -> float:
        return self.implicit_wait_seconds * 1000

    def navigate(self, url: str) -> None:
        logger.debug("Navigating to %s...", url)
        self.page.goto(url, wait_until="domcontentloaded")

    def find_element(self, selector: str) -> Locator:
        """Return the first element matching ``selector`` once it is attached."""
        locator = self.page.locator(selector).first
        try:
            locator.wait_for(state="attached", timeout=self.implicit_wait_ms)
        except PlaywrightTimeoutError:
            raise ElementNotFoundError(selector, self.implicit_wait_seconds) from None
        return locator

    def find_elements(self, selector: str) -> list[Locator]:
        """Return every element matching ``selector``; empty if none attach in time."""
        locator = self.page.locator(selector)
        try:
            locator.first.wait_for(state="attached", timeout=self.implicit_wait_ms)
        except PlaywrightTimeoutError:
            return []
        return locator.all()

    def close(self) -> None:
        if self.closed:
            logger.warning("Browser session already closed")
            return
        self.closed = True
        try:
            self.context.close()
            self.browser.close()
        finally:
            self.playwright.stop()
        logger.debug("Browser session closed")


def open_session(
    headless: bool = True,
    browser_kind: str = "chrome",
    viewport: Optional[ViewportConfig] = None,
) -> BrowserSession:
    """Start Playwright and open one page with the implicit element wait applied.

    Raises:
        SessionStartError: the engine is unknown, not installed, or fails to launch.
    """
    engine = engine_for(browser_kind)
    logger.debug("Launching %s (%s, headless=%s)", browser_kind, engine, headless)
    try:
        playwright = sync_playwright().start()
    except PlaywrightError as e:
        raise SessionStartError(f"Could not start Playwright: {e}") from e

    try:
        browser = getattr(playwright, engine).launch(headless=headless)
        context_kwargs: dict = {}
        if viewport is not None:
            context_kwargs["viewport"] = viewport.as_dict()
        context = browser.new_context(**context_kwargs)
        context.set_default_timeout(IMPLICIT_WAIT_SECONDS * 1000)
        page = context.new_page()
    except PlaywrightError as e:
        playwright.stop()
        raise SessionStartError(f"Could not launch {browser_kind}: {e}") from e

    return BrowserSession(playwright, browser, context, page)


@contextmanager
def browser_session(
    headless: bool = True,
    browser_kind: str = "chrome",
    viewport: Optional[ViewportConfig] = None,
) -> Iterator[BrowserSession]:
    """Open a session and close it on every exit path."""
    session = open_session(headless=headless, browser_kind=browser_kind, viewport=viewport)
    try:
        yield session
    finally:
        session.close()
