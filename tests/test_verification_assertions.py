"""Tests for the element-assertion verification strategy."""

from unittest.mock import Mock

import pytest

from conftest import make_locator
from workshop.verification.assertions import (
    ACCEPTABLE_STATUSES,
    COUNTDOWN_LOCATOR,
    EXPECTED_MENU_ITEMS,
    LOGIN_PAGE_LOCATORS,
    MAIN_PAGE_LOCATORS,
    MENU_ITEM_LOCATOR,
    STATUS_LOCATOR,
    ElementAssertionStrategy,
    check_countdown,
    check_membership,
    check_ordered,
    matches_countdown,
    wait_for_appearance,
)

MENU = ["Card Types", "Credit Cards", "Debit Cards", "Lending", "Loans", "Mortgages"]


class TestCountdown:
    """Tests for the countdown text pattern."""

    @pytest.mark.parametrize("text", [
        "Your nearest branch closes in: 2h 15m 30s",
        "Your nearest branch closes in: 45s",
        "Your nearest branch closes in: 1h 5s",
        "  Your nearest branch closes in: 10m  ",
    ])
    def test_matches(self, text):
        assert matches_countdown(text) is True

    @pytest.mark.parametrize("text", [
        "closes soon",
        "Your nearest branch closes in:",
        "Your nearest branch closes in: 2d",
        "Your nearest branch closes in: 2h15m",
        "Your nearest branch closes in: soon 2h",
    ])
    def test_rejects(self, text):
        assert matches_countdown(text) is False

    def test_check_raises_assertion_error(self):
        with pytest.raises(AssertionError, match="closes soon"):
            check_countdown("closes soon")


class TestOrderedCheck:
    def test_lower_cased_menu_matches(self):
        check_ordered(MENU, EXPECTED_MENU_ITEMS)

    def test_reordering_fails(self):
        reordered = [MENU[1], MENU[0], *MENU[2:]]
        with pytest.raises(AssertionError, match="Item 0"):
            check_ordered(reordered, EXPECTED_MENU_ITEMS)

    def test_length_mismatch_fails(self):
        with pytest.raises(AssertionError, match="Expected 6 items"):
            check_ordered(MENU[:-1], EXPECTED_MENU_ITEMS)

    def test_extra_item_fails(self):
        with pytest.raises(AssertionError):
            check_ordered([*MENU, "Insurance"], EXPECTED_MENU_ITEMS)


class TestMembershipCheck:
    def test_subset_passes(self):
        check_membership(["complete", "pending"], ACCEPTABLE_STATUSES)

    def test_case_is_ignored(self):
        check_membership(["Complete", "DECLINED"], ACCEPTABLE_STATUSES)

    def test_empty_passes(self):
        check_membership([], ACCEPTABLE_STATUSES)

    def test_unknown_value_fails(self):
        with pytest.raises(AssertionError, match="unknown"):
            check_membership(["complete", "unknown"], ACCEPTABLE_STATUSES)


class TestWaitForAppearance:
    def test_returns_when_present(self, mock_session):
        wait_for_appearance(mock_session, "#username", timeout_seconds=1)
        mock_session.page.locator.assert_called_with("#username")

    def test_polls_until_present(self, mock_session):
        locator = make_locator()
        locator.count.side_effect = [0, 0, 2]
        mock_session.page.locator = Mock(return_value=locator)

        wait_for_appearance(mock_session, "#username", timeout_seconds=5, poll_interval=0)

        assert locator.count.call_count == 3

    def test_times_out(self, mock_session):
        mock_session.page.locator = Mock(return_value=make_locator(count=0))

        with pytest.raises(TimeoutError, match="#missing"):
            wait_for_appearance(mock_session, "#missing", timeout_seconds=0.05, poll_interval=0.01)


class TestElementAssertionStrategy:
    """Tests for the page-level checks."""

    def _main_page_session(self, mock_session, countdown="Your nearest branch closes in: 2h 15m 30s",
                           menu=MENU, statuses=("Complete", "Pending")):
        mock_session.find_element.return_value = make_locator(countdown)

        def find_elements(selector):
            if selector == MENU_ITEM_LOCATOR:
                return [make_locator(item) for item in menu]
            if selector == STATUS_LOCATOR:
                return [make_locator(status) for status in statuses]
            return []

        mock_session.find_elements = Mock(side_effect=find_elements)
        return mock_session

    def test_login_page_waits_for_every_locator(self, mock_session):
        ElementAssertionStrategy(mock_session).verify_login_page()
        waited = [c.args[0] for c in mock_session.page.locator.call_args_list]
        assert waited == list(LOGIN_PAGE_LOCATORS)

    def test_main_page_passes(self, mock_session):
        session = self._main_page_session(mock_session)

        ElementAssertionStrategy(session).verify_main_page()

        waited = [c.args[0] for c in session.page.locator.call_args_list]
        assert waited == list(MAIN_PAGE_LOCATORS)
        session.find_element.assert_called_once_with(COUNTDOWN_LOCATOR)

    def test_main_page_bad_countdown(self, mock_session):
        session = self._main_page_session(mock_session, countdown="closes soon")
        with pytest.raises(AssertionError):
            ElementAssertionStrategy(session).verify_main_page()

    def test_main_page_reordered_menu(self, mock_session):
        session = self._main_page_session(mock_session, menu=list(reversed(MENU)))
        with pytest.raises(AssertionError):
            ElementAssertionStrategy(session).verify_main_page()

    def test_main_page_unknown_status(self, mock_session):
        session = self._main_page_session(mock_session, statuses=("complete", "unknown"))
        with pytest.raises(AssertionError, match="unknown"):
            ElementAssertionStrategy(session).verify_main_page()

    def test_main_page_missing_element(self, mock_session):
        mock_session.page.locator = Mock(return_value=make_locator(count=0))
        strategy = ElementAssertionStrategy(mock_session, appearance_timeout=0.01)
        with pytest.raises(TimeoutError):
            strategy.verify_main_page()
