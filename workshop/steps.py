"""The four-step ACME Bank login flow shared by both testing styles."""

from __future__ import annotations

import logging

from workshop.browser.session import BrowserSession
from workshop.verification.base import VerificationStrategy

logger = logging.getLogger(__name__)

ORIGINAL_SITE_URL = "https://demo.applitools.com"
CHANGED_SITE_URL = "https://demo.applitools.com/index_v2.html"

USERNAME_LOCATOR = "#username"
PASSWORD_LOCATOR = "#password"
LOGIN_BUTTON_LOCATOR = "#log-in"

USERNAME = "andy"
PASSWORD = "i<3pandas"


def site_url(original_site: bool) -> str:
    return ORIGINAL_SITE_URL if original_site else CHANGED_SITE_URL


class LoginFlow:
    """Navigate, verify the login page, log in, verify the main page."""

    def __init__(self, session: BrowserSession, strategy: VerificationStrategy, original_site: bool = True):
        self.session = session
        self.strategy = strategy
        self.original_site = original_site

    def navigate(self) -> None:
        self.session.navigate(site_url(self.original_site))

    def verify_login_page(self) -> None:
        self.strategy.verify_login_page()

    def perform_login(self) -> None:
        self.session.find_element(USERNAME_LOCATOR).fill(USERNAME)
        self.session.find_element(PASSWORD_LOCATOR).fill(PASSWORD)
        self.session.find_element(LOGIN_BUTTON_LOCATOR).click()

    def verify_main_page(self) -> None:
        self.strategy.verify_main_page()

    def run(self) -> None:
        steps = (
            ("navigate", self.navigate),
            ("verify login page", self.verify_login_page),
            ("perform login", self.perform_login),
            ("verify main page", self.verify_main_page),
        )
        for index, (name, step) in enumerate(steps, 1):
            logger.debug("  Step %d/%d: %s", index, len(steps), name)
            step()
