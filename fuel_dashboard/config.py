"""
Configuration management for the Fuel Dashboard.

Loads settings from environment variables with sensible defaults.
"""
from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

DEFAULT_API_URL = "http://127.0.0.1:5000"


def _parse_timeout() -> float:
    """Parse FUEL_REQUEST_TIMEOUT, falling back to 30 seconds."""
    env_val = os.getenv("FUEL_REQUEST_TIMEOUT")
    if not env_val:
        return 30.0
    try:
        return float(env_val.strip())
    except ValueError:
        return 30.0


@dataclass
class DashboardConfig:
    """Configuration settings for the Fuel Dashboard."""

    # Backend connection
    api_url: str = field(
        default_factory=lambda: os.getenv("FUEL_API_URL") or DEFAULT_API_URL
    )
    request_timeout: float = field(default_factory=_parse_timeout)

    # Presentation
    currency_symbol: str = field(
        default_factory=lambda: os.getenv("FUEL_CURRENCY_SYMBOL", "₦")
    )
    output_path: str = field(
        default_factory=lambda: os.getenv("FUEL_DASHBOARD_OUTPUT", "dashboard.html")
    )
    # How plotly.js is embedded in the rendered page: "cdn", "inline" or "none"
    plotlyjs: str = field(default_factory=lambda: os.getenv("FUEL_PLOTLYJS", "cdn"))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(
        default_factory=lambda: os.getenv("FUEL_DASHBOARD_LOG_FILE")
    )

    @classmethod
    def from_env(cls) -> "DashboardConfig":
        """Create config from environment variables."""
        return cls()

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []
        if not self.api_url:
            errors.append("FUEL_API_URL is required")
        elif not self.api_url.startswith(("http://", "https://")):
            errors.append(f"FUEL_API_URL must be an http(s) URL, got {self.api_url!r}")
        if self.request_timeout <= 0:
            errors.append("FUEL_REQUEST_TIMEOUT must be positive")
        if self.plotlyjs not in ("cdn", "inline", "none"):
            errors.append("FUEL_PLOTLYJS must be one of: cdn, inline, none")
        return errors
