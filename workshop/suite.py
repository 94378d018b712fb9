"""Suite driver: composes sessions, steps and verification into runnable suites."""

from __future__ import annotations

import logging
import time
from typing import Callable, Literal, Optional

from applitools.playwright import VisualGridRunner

from workshop.browser.session import browser_session
from workshop.errors import WorkshopError
from workshop.models.config import RunConfiguration, WorkshopSettings
from workshop.models.test_result import SuiteRun, TestResult
from workshop.steps import LoginFlow
from workshop.verification.assertions import ElementAssertionStrategy
from workshop.verification.visual import VisualSnapshotStrategy
from workshop.visual.eyes import (
    VisualCheckClient,
    build_configuration,
    create_runner,
    describe_results,
    results_passed,
)

logger = logging.getLogger(__name__)

Style = Literal["traditional", "visual"]


class WorkshopSuite:
    """Owns the shared run configuration and runs each testing style end to end."""

    def __init__(self, settings: WorkshopSettings, config: Optional[RunConfiguration] = None):
        self.settings = settings
        self.config = config or RunConfiguration.from_env(settings)

    def traditional_login(self) -> None:
        with browser_session(headless=self.settings.headless,
                             browser_kind=self.settings.browser) as session:
            flow = LoginFlow(session, ElementAssertionStrategy(session), self.settings.original_site)
            flow.run()

    def visual_login(self, runner: VisualGridRunner, test_name: str = "login") -> None:
        configuration = build_configuration(self.config)
        # Checkpoints are captured once in local Chrome; the grid renders every target
        with browser_session(headless=self.config.headless, browser_kind="chrome",
                             viewport=self.config.viewport) as session:
            client = VisualCheckClient(runner, configuration)
            try:
                client.open(session.page, self.config.app_name, test_name, self.config.viewport)
                flow = LoginFlow(session, VisualSnapshotStrategy(client), self.settings.original_site)
                flow.run()
                client.close_async()
            finally:
                client.abort_async()

    def run_traditional(self) -> SuiteRun:
        result = self._run_test("login", "traditional", self.traditional_login)
        return SuiteRun(style="traditional", test_results=[result])

    def run_visual(self) -> SuiteRun:
        runner = create_runner(self.config)
        result = self._run_test("login", "visual", lambda: self.visual_login(runner, "login"))
        # Blocks until the grid has rendered and scored every closed test
        summary = runner.get_all_test_results(False)
        passed = results_passed(summary)
        logger.info("Visual results for batch '%s': %s",
                    self.config.batch_name, "passed" if passed else "not passed")
        return SuiteRun(style="visual", test_results=[result],
                        visual_passed=passed, visual_report=describe_results(summary))

    def _run_test(self, name: str, style: Style, test: Callable[[], None]) -> TestResult:
        logger.info("Running %s test: %s", style, name)
        start = time.time()
        try:
            test()
        except (AssertionError, TimeoutError, WorkshopError) as e:
            logger.error("[FAIL] %s (%s): %s", name, style, e)
            return TestResult(test_name=name, style=style, result="fail",
                              duration_seconds=round(time.time() - start, 2),
                              failure_reason=f"{type(e).__name__}: {e}")
        except Exception as e:
            logger.exception("Test %s (%s) crashed", name, style)
            return TestResult(test_name=name, style=style, result="error",
                              duration_seconds=round(time.time() - start, 2),
                              failure_reason=f"{type(e).__name__}: {e}")
        duration = round(time.time() - start, 2)
        logger.info("[PASS] %s (%s) in %.1fs", name, style, duration)
        return TestResult(test_name=name, style=style, result="pass", duration_seconds=duration)
