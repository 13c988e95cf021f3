# storefront_e2e/utils/config.py
from __future__ import annotations

import functools
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


# ---------- Enums ----------

class BrowserType(str, Enum):
    chromium = "chromium"
    firefox = "firefox"
    webkit = "webkit"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# ---------- Settings ----------

class Settings(BaseSettings):
    """
    Central configuration for the storefront acceptance suite.

    Values load in this order of precedence:
      1) Environment variables
      2) .env file in project root
      3) Defaults below
    """

    # ---- Storefront ----
    BASE_URL: str = Field(default="http://localhost:8080", description="WordPress site URL (no trailing slash)")
    ADMIN_USERNAME: str = Field(default="admin")
    ADMIN_PASSWORD: str = Field(default="password")

    # ---- Browser configuration ----
    HEADLESS: bool = Field(default=True, description="Run the browser headless")
    BROWSER_TYPE: BrowserType = Field(default=BrowserType.chromium, description="Playwright browser")
    VIEWPORT_WIDTH: int = Field(default=1366, ge=320, le=7680)
    VIEWPORT_HEIGHT: int = Field(default=768, ge=320, le=4320)
    SLOW_MO: int = Field(default=0, ge=0, description="Slow down actions (ms) for debugging")
    USER_AGENT: Optional[str] = Field(default=None)

    # ---- Timeouts ----
    PAGE_LOAD_TIMEOUT: int = Field(default=60000, ge=1000)
    ACTION_TIMEOUT_MS: int = Field(default=5000, ge=100, description="Single click/check/select attempt")
    WAIT_TIMEOUT_MS: int = Field(default=10000, ge=100, description="Default for wait_for_* helpers")
    AJAX_TIMEOUT_MS: int = Field(default=10000, ge=100, description="Bound on the jQuery.active wait")
    ORDER_RECEIVED_TIMEOUT_MS: int = Field(default=30000, ge=1000)

    # ---- Retry ----
    TRY_ACTION_ATTEMPTS: int = Field(default=3, ge=1)

    # ---- Database (WordPress) ----
    DB_HOST: str = Field(default="127.0.0.1")
    DB_PORT: int = Field(default=3306, ge=1, le=65535)
    DB_NAME: str = Field(default="wordpress")
    DB_USER: str = Field(default="root")
    DB_PASSWORD: str = Field(default="")
    DB_TABLE_PREFIX: str = Field(default="wp_")
    DB_URL: Optional[str] = Field(default=None, description="Overrides the DB_* parts when set")

    # ---- WooCommerce REST API ----
    WC_CONSUMER_KEY: Optional[str] = None
    WC_CONSUMER_SECRET: Optional[str] = None
    API_TIMEOUT_S: float = Field(default=30.0, gt=0)

    # ---- Artifacts ----
    OUTPUT_DIR: Path = Field(default=Path("./_output"))
    SCREENSHOT_ON_FAILURE: bool = Field(default=True)

    # ---- Logging ----
    LOG_LEVEL: LogLevel = Field(default=LogLevel.INFO)
    LOG_TO_FILE: bool = Field(default=False)
    LOG_FILE: Path = Field(default=Path("./_output/storefront-e2e.log"))
    COLORIZED_OUTPUT: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("BASE_URL")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith("http"):
            raise ValueError("BASE_URL must be an absolute http(s) URL")
        return v.rstrip("/")

    @field_validator("OUTPUT_DIR", "LOG_FILE", mode="after")
    @classmethod
    def _absolutize(cls, v: Path, info):
        return v if v.is_absolute() else Path.cwd() / v

    def ensure_dirs(self) -> None:
        """Create required directories (idempotent)."""
        for p in {self.OUTPUT_DIR, self.LOG_FILE.parent}:
            p.mkdir(parents=True, exist_ok=True)

    def url_for(self, path: str) -> str:
        """Absolute storefront URL for a site-relative path."""
        if path.startswith("http"):
            return path
        return f"{self.BASE_URL}/{path.lstrip('/')}"

    def database_url(self) -> URL | str:
        if self.DB_URL:
            return self.DB_URL
        return URL.create(
            "mysql+mysqlconnector",
            username=self.DB_USER,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )

    # Convenience: Playwright launch options dict
    def playwright_launch_kwargs(self) -> dict:
        return {
            "headless": self.HEADLESS,
            "slow_mo": self.SLOW_MO,
        }

    # Convenience: Playwright new_context kwargs
    def playwright_context_kwargs(self) -> dict:
        viewport = {"width": self.VIEWPORT_WIDTH, "height": self.VIEWPORT_HEIGHT}
        ctx = {"viewport": viewport, "base_url": self.BASE_URL}
        if self.USER_AGENT:
            ctx["user_agent"] = self.USER_AGENT
        return ctx

    def masked(self) -> dict:
        """Settings as a plain dict with secrets blanked, for display."""
        secret = {"ADMIN_PASSWORD", "DB_PASSWORD", "DB_URL", "WC_CONSUMER_SECRET"}
        out = {}
        for k, v in self.model_dump().items():
            if k in secret and v:
                v = "********"
            elif isinstance(v, Path):
                v = str(v)
            elif isinstance(v, Enum):
                v = v.value
            out[k] = v
        return out


# --------- Public accessor (memoized) ---------

@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load and cache settings once per process.
    Call `get_settings.cache_clear()` if you need to reload after changing env.
    """
    s = Settings()
    s.ensure_dirs()
    return s

