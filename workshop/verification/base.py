"""The verification seam shared by both testing styles."""

from __future__ import annotations

from typing import Protocol


class VerificationStrategy(Protocol):
    """Checks performed at the two checkpoints of the login flow."""

    def verify_login_page(self) -> None: ...

    def verify_main_page(self) -> None: ...
