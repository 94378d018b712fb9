"""Pytest configuration and shared fixtures."""

from types import SimpleNamespace
from typing import Optional
from unittest.mock import Mock

import pytest
from playwright.sync_api import Page

from workshop.models.config import RunConfiguration, ViewportConfig

WORKSHOP_ENV_VARS = ("APPLITOOLS_API_KEY", "HEADLESS", "DEMO_SITE", "BROWSER")


def pytest_addoption(parser):
    parser.addoption(
        "--run-ui", action="store_true", default=False,
        help="Run the live browser suites under tests/ui against the demo site",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "ui: live browser test against the ACME Bank demo site")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-ui"):
        return
    skip_ui = pytest.mark.skip(reason="live browser test; pass --run-ui to run")
    for item in items:
        if "ui" in item.keywords:
            item.add_marker(skip_ui)


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every workshop environment variable."""
    for name in WORKSHOP_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def run_config() -> RunConfiguration:
    """A small run configuration: one desktop browser and one device."""
    return (
        RunConfiguration(api_key="test-key")
        .add_browser(800, 600, "chrome")
        .add_device_emulation("Pixel 2", "portrait")
    )


# ============================================================================
# Visual Service Fixtures
# ============================================================================


def make_container(
    name: str = "login",
    is_passed: bool = True,
    is_new: bool = False,
    status: str = "Passed",
    exception: Optional[Exception] = None,
) -> SimpleNamespace:
    """Create a stand-in for one entry of the grid runner's results summary."""
    if exception is not None:
        return SimpleNamespace(test_results=None, exception=exception)
    results = SimpleNamespace(
        name=name, is_passed=is_passed, is_new=is_new, status=status,
        url=f"https://eyes.applitools.com/app/batches/1/{name}",
    )
    return SimpleNamespace(test_results=results, exception=None)


def make_summary(*containers: SimpleNamespace) -> SimpleNamespace:
    return SimpleNamespace(all_results=list(containers))


@pytest.fixture
def mock_eyes(monkeypatch: pytest.MonkeyPatch) -> Mock:
    """Replace the Eyes class used by the visual client; returns the instance mock."""
    eyes = Mock()
    monkeypatch.setattr("workshop.visual.eyes.Eyes", Mock(return_value=eyes))
    return eyes


@pytest.fixture
def mock_runner() -> Mock:
    runner = Mock()
    runner.get_all_test_results.return_value = make_summary(make_container())
    return runner


# ============================================================================
# Playwright / Session Fixtures
# ============================================================================


def make_locator(text: str = "", count: int = 1) -> Mock:
    """Create a mock Playwright locator."""
    locator = Mock()
    locator.inner_text.return_value = text
    locator.count.return_value = count
    locator.first = locator
    return locator


@pytest.fixture
def mock_page() -> Mock:
    """Create a mock Playwright page."""
    page = Mock(spec=Page)
    page.url = "https://demo.applitools.com"
    page.viewport_size = {"width": 1024, "height": 768}
    page.locator = Mock(return_value=make_locator())
    return page


@pytest.fixture
def mock_session(mock_page: Mock) -> Mock:
    """Create a mock browser session wrapping ``mock_page``."""
    session = Mock()
    session.page = mock_page
    session.implicit_wait_seconds = 10
    session.find_element.return_value = make_locator()
    session.find_elements.return_value = []
    return session


@pytest.fixture
def viewport() -> ViewportConfig:
    return ViewportConfig(width=1024, height=768)
