"""Configuration models for the workshop suites."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

API_KEY_ENV = "APPLITOOLS_API_KEY"
HEADLESS_ENV = "HEADLESS"
DEMO_SITE_ENV = "DEMO_SITE"
BROWSER_ENV = "BROWSER"

DEFAULT_APP_NAME = "ACME Bank Web App"
DEFAULT_BATCH_NAME = "ACME Bank Workshop: Playwright Python with the Ultrafast Grid"

BrowserKind = Literal["chrome", "firefox", "safari", "edge"]
Orientation = Literal["portrait", "landscape"]


def read_env(name: str, default: str) -> str:
    """Return the environment value for ``name``, or ``default`` if unset or empty."""
    value = os.environ.get(name)
    if value:
        return value
    return default


def env_flag(name: str, default: str, expected: str = "true") -> bool:
    """Compare an environment value against ``expected``, ignoring case."""
    return read_env(name, default).strip().lower() == expected


class ViewportConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = 1024
    height: int = 768

    def as_dict(self) -> dict[str, int]:
        return {"width": self.width, "height": self.height}


class BrowserTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int
    height: int
    browser: BrowserKind = "chrome"

    @property
    def name(self) -> str:
        return f"{self.browser} {self.width}x{self.height}"


class DeviceTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    device_name: str
    orientation: Orientation = "portrait"

    @property
    def name(self) -> str:
        return f"{self.device_name} ({self.orientation})"


Target = Union[BrowserTarget, DeviceTarget]


class WorkshopSettings(BaseModel):
    """Test control inputs, read once from the environment."""

    api_key: str = ""
    headless: bool = True
    browser: str = "chrome"
    demo_site: str = "original"

    @property
    def original_site(self) -> bool:
        return self.demo_site.strip().lower() == "original"

    @classmethod
    def from_env(cls) -> "WorkshopSettings":
        return cls(
            api_key=read_env(API_KEY_ENV, ""),
            headless=env_flag(HEADLESS_ENV, "true"),
            browser=read_env(BROWSER_ENV, "chrome").strip().lower(),
            demo_site=read_env(DEMO_SITE_ENV, "original"),
        )


class RunConfiguration(BaseModel):
    """Suite-wide settings shared by every test; immutable once built."""

    model_config = ConfigDict(frozen=True)

    api_key: str = ""
    headless: bool = True
    app_name: str = DEFAULT_APP_NAME
    batch_name: str = DEFAULT_BATCH_NAME
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)
    browsers: tuple[BrowserTarget, ...] = ()
    devices: tuple[DeviceTarget, ...] = ()

    # Tests rendered in parallel by the Ultrafast Grid
    test_concurrency: int = Field(default=5, ge=1)

    @field_validator("api_key", mode="before")
    @classmethod
    def resolve_env_api_key(cls, v: Optional[str]) -> str:
        # An unset variable passes through as "" and fails later in the visual service
        if v is None:
            return ""
        if isinstance(v, str) and v.startswith("env:"):
            return read_env(v[4:], "")
        return v

    def add_browser(self, width: int, height: int, browser: BrowserKind) -> "RunConfiguration":
        target = BrowserTarget(width=width, height=height, browser=browser)
        return self.model_copy(update={"browsers": self.browsers + (target,)})

    def add_device_emulation(
        self, device_name: str, orientation: Orientation = "portrait"
    ) -> "RunConfiguration":
        target = DeviceTarget(device_name=device_name, orientation=orientation)
        return self.model_copy(update={"devices": self.devices + (target,)})

    def target_matrix(self) -> list[Target]:
        """Browser targets then device targets, in insertion order, without duplicates."""
        seen: set[Target] = set()
        matrix: list[Target] = []
        for target in (*self.browsers, *self.devices):
            if target in seen:
                continue
            seen.add(target)
            matrix.append(target)
        return matrix

    @classmethod
    def from_env(cls, settings: WorkshopSettings | None = None) -> "RunConfiguration":
        """Build the workshop's default configuration from the environment."""
        settings = settings or WorkshopSettings.from_env()
        return (
            cls(api_key=settings.api_key, headless=settings.headless)
            .add_browser(800, 600, "chrome")
            .add_browser(1600, 1200, "firefox")
            .add_browser(1024, 768, "safari")
            .add_device_emulation("Pixel 2", "portrait")
            .add_device_emulation("Nexus 10", "landscape")
        )

    @classmethod
    def load(cls, path: str | Path) -> "RunConfiguration":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file. The credential is written as an env reference."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump(mode="json")
        data["api_key"] = f"env:{API_KEY_ENV}"
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
