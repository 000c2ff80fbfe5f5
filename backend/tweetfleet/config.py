"""Configuration: reads all settings from environment variables."""

import os

from tweetfleet.env_utils import get_env


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_csv(name: str) -> list[str]:
    raw = os.getenv(name, "")
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))
CORS_ORIGINS: list[str] = _env_csv("CORS_ORIGINS")
LOG_REDACTION: bool = _env_bool("LOG_REDACTION", True)
USER_AGENT: str = os.getenv("USER_AGENT", "Tweetfleet Slack Inviter")
SHUTDOWN_DRAIN_SECONDS: float = float(os.getenv("SHUTDOWN_DRAIN_SECONDS", "10"))

# Slack
SLACK_SIGNING_SECRET: str = get_env("SLACK_SIGNING_SECRET", "")
SLACK_BOT_TOKEN: str = get_env("SLACK_BOT_TOKEN", "")
SLACK_MOD_CHANNEL: str = os.getenv("SLACK_MOD_CHANNEL", "")
SLACK_API_BASE: str = os.getenv("SLACK_API_BASE", "https://slack.com/api")
SIGNATURE_TOLERANCE_SECONDS: int = int(os.getenv("SIGNATURE_TOLERANCE_SECONDS", "300"))

# EVE SSO
EVE_CLIENT_ID: str = os.getenv("EVE_CLIENT_ID", "")
EVE_CLIENT_SECRET: str = get_env("EVE_CLIENT_SECRET", "")
EVE_CALLBACK: str = os.getenv("EVE_CALLBACK", "")
EVE_SSO_BASE: str = os.getenv("EVE_SSO_BASE", "https://login.eveonline.com")
OAUTH_STATE_TTL_SECONDS: float = float(os.getenv("OAUTH_STATE_TTL_SECONDS", "300"))
OAUTH_STATE_SWEEP_SECONDS: float = float(os.getenv("OAUTH_STATE_SWEEP_SECONDS", "300"))

# ESI
ESI_BASE_URL: str = os.getenv("ESI_BASE_URL", "https://esi.evetech.net")
STATUS_CACHE_TTL_SECONDS: float = float(os.getenv("STATUS_CACHE_TTL_SECONDS", "60"))
STATUS_CACHE_SWEEP_SECONDS: float = float(os.getenv("STATUS_CACHE_SWEEP_SECONDS", "30"))
