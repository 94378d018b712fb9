"""Visual checks through the Applitools Eyes SDK and its Ultrafast Grid.

One ``VisualCheckClient`` wraps the ``Eyes`` instance of one test. Its
``close_async`` hands the test to the shared ``VisualGridRunner`` without
waiting; ``runner.get_all_test_results`` is the only place results are joined.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from applitools.playwright import (
    BatchInfo,
    BrowserType,
    Configuration,
    DeviceName,
    Eyes,
    RectangleSize,
    RunnerOptions,
    ScreenOrientation,
    Target,
    VisualGridRunner,
)
from playwright.sync_api import Page

from workshop.errors import AuthenticationError, ConfigurationError, VisualSessionError
from workshop.models.config import API_KEY_ENV, BrowserTarget, RunConfiguration, ViewportConfig

logger = logging.getLogger(__name__)

UNOPENED = "unopened"
OPENED = "opened"
FINALIZING = "finalizing"
ABORTING = "aborting"

BROWSER_TYPES = {
    "chrome": BrowserType.CHROME,
    "firefox": BrowserType.FIREFOX,
    "safari": BrowserType.SAFARI,
    "edge": BrowserType.EDGE_CHROMIUM,
}

ORIENTATIONS = {
    "portrait": ScreenOrientation.PORTRAIT,
    "landscape": ScreenOrientation.LANDSCAPE,
}


class MatchLevel(str, Enum):
    STRICT = "strict"
    # Compares structure only; text changes inside a matching layout are accepted
    LAYOUT = "layout"


def device_name(name: str) -> DeviceName:
    try:
        return DeviceName(name)
    except ValueError:
        raise ConfigurationError(f"Unknown emulated device '{name}'") from None


def build_configuration(config: RunConfiguration) -> Configuration:
    """Translate the run configuration into an Eyes ``Configuration``.

    Raises:
        ConfigurationError: a device target names a device the grid does not know.
    """
    eyes_config = Configuration()
    if config.api_key:
        eyes_config.set_api_key(config.api_key)
    eyes_config.set_batch(BatchInfo(config.batch_name))
    for target in config.target_matrix():
        if isinstance(target, BrowserTarget):
            eyes_config.add_browser(target.width, target.height, BROWSER_TYPES[target.browser])
        else:
            eyes_config.add_device_emulation(
                device_name(target.device_name), ORIENTATIONS[target.orientation]
            )
    logger.debug("Visual configuration: batch '%s', %d target(s)",
                 config.batch_name, len(config.target_matrix()))
    return eyes_config


def create_runner(config: RunConfiguration) -> VisualGridRunner:
    return VisualGridRunner(RunnerOptions().test_concurrency(config.test_concurrency))


class VisualCheckClient:
    """Opens, checks and finalizes one visual test."""

    def __init__(self, runner: VisualGridRunner, configuration: Configuration):
        self.configuration = configuration
        self.eyes = Eyes(runner)
        self.eyes.set_configuration(configuration)
        self.state = UNOPENED
        self.test_name = ""

    def open(self, page: Page, app_name: str, test_name: str, viewport: ViewportConfig) -> None:
        """Bind the test to ``page``.

        Raises:
            AuthenticationError: neither the run configuration nor $APPLITOOLS_API_KEY holds a key.
        """
        if self.state != UNOPENED:
            raise VisualSessionError(f"Cannot open a visual client that is {self.state}")
        if not self.configuration.api_key:
            raise AuthenticationError(f"No visual testing API key; set {API_KEY_ENV}")
        self.eyes.open(page, app_name, test_name, RectangleSize(viewport.width, viewport.height))
        self.test_name = test_name
        self.state = OPENED
        logger.debug("Opened visual test %s / %s", app_name, test_name)

    def check(self, name: str, match_level: MatchLevel = MatchLevel.STRICT) -> None:
        """Capture the full window as checkpoint ``name``; the grid scores it later."""
        if self.state != OPENED:
            raise VisualSessionError(f"check('{name}') requires an opened client (state: {self.state})")
        settings = Target.window().fully().with_name(name)
        if match_level is MatchLevel.LAYOUT:
            settings = settings.layout()
        self.eyes.check(settings)
        logger.info("Checkpoint '%s' captured (%s)", name, match_level.value)

    def close_async(self) -> None:
        """Finalize the test without waiting for its result."""
        if self.state in (FINALIZING, ABORTING):
            logger.warning("Visual test %s already %s; close ignored", self.test_name, self.state)
            return
        if self.state == UNOPENED:
            raise VisualSessionError("Cannot close a visual client that was never opened")
        # State changes only after the SDK accepts the close
        self.eyes.close_async()
        self.state = FINALIZING

    def abort_async(self) -> None:
        """Discard the test. A no-op once it was closed or if it never opened."""
        if self.state in (FINALIZING, ABORTING):
            logger.debug("Visual test %s already %s; abort ignored", self.test_name, self.state)
            return
        if self.state == UNOPENED:
            logger.debug("Visual client was never opened; nothing to abort")
            return
        logger.warning("Aborting visual test %s", self.test_name)
        self.eyes.abort_async()
        self.state = ABORTING


def _status_label(results: Any) -> str:
    if results.is_new:
        return "NEW"
    status = getattr(results.status, "value", results.status)
    return str(status).upper()


def results_passed(summary: Any) -> bool:
    """True when at least one test resolved and every test is new or passed."""
    containers = list(summary.all_results)
    if not containers:
        return False
    for container in containers:
        results = container.test_results
        if container.exception is not None or results is None:
            return False
        if not (results.is_passed or results.is_new):
            return False
    return True


def describe_results(summary: Any) -> list[str]:
    """One printable line per collected test result."""
    lines = []
    for container in summary.all_results:
        results = container.test_results
        if results is None:
            lines.append(f"[ERROR] {container.exception}")
            continue
        line = f"[{_status_label(results)}] {results.name}"
        if results.url:
            line += f"  {results.url}"
        lines.append(line)
    if not lines:
        lines.append("No visual test results were collected")
    return lines
