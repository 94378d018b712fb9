"""Visual verification: one snapshot checkpoint per page."""

from __future__ import annotations

from workshop.visual.eyes import MatchLevel, VisualCheckClient


class VisualSnapshotStrategy:
    """Delegates each page check to a visual client."""

    def __init__(self, client: VisualCheckClient):
        self.client = client

    def verify_login_page(self) -> None:
        self.client.check("Login page")

    def verify_main_page(self) -> None:
        # Layout matching ignores the "Your nearest branch closes in: ..." countdown
        self.client.check("Main page", MatchLevel.LAYOUT)
