"""ScalpBot — application configuration.

Loads .env variables into a typed config object.
Validates required variables on startup.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from scalpbot.models.style_config import get_style_config


_REQUIRED_VARS = [
    "TRADIER_API_KEY",
]

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    """Typed configuration loaded from environment variables."""

    tradier_api_key: str
    tradier_sandbox: bool
    trading_style: str
    poll_interval_seconds: int
    time_stop_minutes: int
    exchange_timezone: str
    log_level: str
    api_port: int

    @property
    def tradier_base_url(self) -> str:
        """Return the Tradier API base URL based on the sandbox flag."""
        if self.tradier_sandbox:
            return "https://sandbox.tradier.com/v1"
        return "https://api.tradier.com/v1"


def load_config(env_path: str | None = None) -> Config:
    """Load configuration from environment variables.

    Raises ``ValueError`` with a message naming the missing variable when a
    required variable is absent, or when ``TRADING_STYLE`` is unknown.
    """
    load_dotenv(dotenv_path=env_path)

    missing = [v for v in _REQUIRED_VARS if not os.environ.get(v)]
    if missing:
        raise ValueError(
            f"Missing required environment variable(s): {', '.join(missing)}"
        )

    style_name = os.environ.get("TRADING_STYLE", "scalping")
    try:
        style = get_style_config(style_name)
    except KeyError as exc:
        raise ValueError(exc.args[0]) from exc

    return Config(
        tradier_api_key=os.environ["TRADIER_API_KEY"],
        tradier_sandbox=(
            os.environ.get("TRADIER_SANDBOX", "false").strip().lower()
            in _TRUE_VALUES
        ),
        trading_style=style.name,
        poll_interval_seconds=int(os.environ.get("POLL_INTERVAL_SECONDS", "15")),
        time_stop_minutes=int(os.environ.get("TIME_STOP_MINUTES", "30")),
        exchange_timezone=os.environ.get("EXCHANGE_TIMEZONE", "America/New_York"),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        api_port=int(os.environ.get("API_PORT", "8080")),
    )
