"""Traditional verification: wait for elements and assert on their text."""

from __future__ import annotations

import logging
import re
import time
from typing import Iterable, Sequence

from workshop.browser.session import BrowserSession

logger = logging.getLogger(__name__)

APPEARANCE_TIMEOUT_SECONDS = 15
POLL_INTERVAL_SECONDS = 0.25

COUNTDOWN_PATTERN = re.compile(r"Your nearest branch closes in:( \d+[hms])+")

LOGIN_PAGE_LOCATORS = (
    "div.logo-w",
    "#username",
    "#password",
    "#log-in",
    "input.form-check-input",
)

MAIN_PAGE_LOCATORS = (
    "div.logo-w",
    "div.element-search.autosuggest-search-activator > input",
    "div.avatar-w img",
    "ul.main-menu",
    "xpath=//a/span[.='Credit cards']",
)

COUNTDOWN_LOCATOR = "#time"
MENU_ITEM_LOCATOR = "ul.main-menu li span"
STATUS_LOCATOR = "xpath=//td[./span[contains(@class, 'status-pill')]]/span[2]"

EXPECTED_MENU_ITEMS = (
    "card types",
    "credit cards",
    "debit cards",
    "lending",
    "loans",
    "mortgages",
)
ACCEPTABLE_STATUSES = frozenset({"complete", "pending", "declined"})


def matches_countdown(text: str) -> bool:
    return COUNTDOWN_PATTERN.fullmatch(text.strip()) is not None


def check_countdown(text: str) -> None:
    if not matches_countdown(text):
        raise AssertionError(f"Countdown text has an unexpected format: '{text}'")


def check_ordered(observed: Sequence[str], expected: Sequence[str]) -> None:
    """Lower-case ``observed`` and compare it position by position with ``expected``."""
    actual = [item.strip().lower() for item in observed]
    if len(actual) != len(expected):
        raise AssertionError(
            f"Expected {len(expected)} items {list(expected)}, found {len(actual)}: {actual}"
        )
    for index, (got, want) in enumerate(zip(actual, expected)):
        if got != want:
            raise AssertionError(f"Item {index}: expected '{want}', got '{got}'")


def check_membership(observed: Iterable[str], allowed: Iterable[str]) -> None:
    """Every lower-cased observed value must belong to ``allowed``."""
    allowed = set(allowed)
    unexpected = [item for item in (o.strip().lower() for o in observed) if item not in allowed]
    if unexpected:
        raise AssertionError(f"Unexpected values {unexpected} (allowed: {sorted(allowed)})")


def wait_for_appearance(
    session: BrowserSession,
    selector: str,
    timeout_seconds: float = APPEARANCE_TIMEOUT_SECONDS,
    poll_interval: float = POLL_INTERVAL_SECONDS,
) -> None:
    """Poll until at least one element matches ``selector``.

    Raises:
        TimeoutError: nothing matched before ``timeout_seconds`` elapsed.
    """
    deadline = time.monotonic() + timeout_seconds
    while True:
        if session.page.locator(selector).count() > 0:
            logger.debug("Element appeared: %s", selector)
            return
        if time.monotonic() >= deadline:
            raise TimeoutError(f"Element '{selector}' did not appear within {timeout_seconds:g}s")
        time.sleep(poll_interval)


def _texts(session: BrowserSession, selector: str) -> list[str]:
    elements = session.find_elements(selector)
    return [element.inner_text() for element in elements]


class ElementAssertionStrategy:
    """Verifies each page by waiting for known elements and checking their text."""

    def __init__(self, session: BrowserSession, appearance_timeout: float = APPEARANCE_TIMEOUT_SECONDS):
        self.session = session
        self.appearance_timeout = appearance_timeout

    def _wait_all(self, selectors: Iterable[str]) -> None:
        for selector in selectors:
            wait_for_appearance(self.session, selector, self.appearance_timeout)

    def verify_login_page(self) -> None:
        self._wait_all(LOGIN_PAGE_LOCATORS)

    def verify_main_page(self) -> None:
        self._wait_all(MAIN_PAGE_LOCATORS)

        countdown = self.session.find_element(COUNTDOWN_LOCATOR)
        check_countdown(countdown.inner_text())

        check_ordered(_texts(self.session, MENU_ITEM_LOCATOR), EXPECTED_MENU_ITEMS)
        check_membership(_texts(self.session, STATUS_LOCATOR), ACCEPTABLE_STATUSES)
