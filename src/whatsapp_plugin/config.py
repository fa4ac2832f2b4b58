"""
WhatsApp Plugin Configuration

Settings are resolved field by field: explicit value, then environment
variable, then default.
"""

import os
from dataclasses import dataclass, fields
from typing import Any, Mapping

from whatsapp_plugin.errors import WhatsAppConfigurationError

DEFAULT_API_VERSION = "v17.0"
DEFAULT_BASE_URL = "https://graph.facebook.com"
DEFAULT_CACHE_MESSAGE_SECONDS = 300
DEFAULT_CACHE_CONTACT_SECONDS = 3600
DEFAULT_REQUEST_TIMEOUT_MS = 30000
DEFAULT_CACHE_MAX_ENTRIES = 1000

# field name -> (environment variable, default)
_ENV_SOURCES: dict[str, tuple[str, Any]] = {
    "api_version": ("WHATSAPP_API_VERSION", DEFAULT_API_VERSION),
    "api_token": ("WHATSAPP_API_TOKEN", None),
    "phone_number_id": ("WHATSAPP_PHONE_NUMBER_ID", None),
    "business_account_id": ("WHATSAPP_BUSINESS_ACCOUNT_ID", None),
    "cache_message_seconds": ("CACHE_MESSAGE_SECONDS", DEFAULT_CACHE_MESSAGE_SECONDS),
    "cache_contact_seconds": ("CACHE_CONTACT_SECONDS", DEFAULT_CACHE_CONTACT_SECONDS),
    "request_timeout": ("DEFAULT_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT_MS),
    "cache_max_entries": ("WHATSAPP_CACHE_MAX_ENTRIES", DEFAULT_CACHE_MAX_ENTRIES),
    "base_url": ("WHATSAPP_API_BASE_URL", DEFAULT_BASE_URL),
}

_NUMERIC_FIELDS = {
    "cache_message_seconds",
    "cache_contact_seconds",
    "request_timeout",
    "cache_max_entries",
}


@dataclass
class WhatsAppConfig:
    """
    WhatsApp Cloud API configuration.

    Any field left as None or "" is filled in by resolve().
    """

    api_version: str | None = None
    api_token: str | None = None
    phone_number_id: str | None = None
    business_account_id: str | None = None
    cache_message_seconds: float | None = None  # Message cache TTL
    cache_contact_seconds: float | None = None  # Contact cache TTL
    request_timeout: float | None = None  # Milliseconds
    cache_max_entries: int | None = None
    base_url: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "WhatsAppConfig":
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def resolve(self) -> "WhatsAppConfig":
        """
        Return a copy with every unset field taken from the environment
        or the defaults.

        Raises:
            WhatsAppConfigurationError: If a numeric variable is not a number
        """
        values: dict[str, Any] = {}
        for name, (env_var, default) in _ENV_SOURCES.items():
            value = getattr(self, name)
            if value is None or value == "":
                value = os.getenv(env_var) or None
                if value is not None and name in _NUMERIC_FIELDS:
                    value = _parse_number(env_var, value)
            if value is None:
                value = default
            values[name] = value

        values["cache_max_entries"] = int(values["cache_max_entries"])
        return WhatsAppConfig(**values)

    @property
    def api_base_url(self) -> str:
        """Versioned Graph API base URL."""
        base = (self.base_url or DEFAULT_BASE_URL).rstrip("/")
        return f"{base}/{self.api_version or DEFAULT_API_VERSION}"

    @property
    def timeout_seconds(self) -> float:
        """Request timeout converted for httpx."""
        timeout_ms = self.request_timeout or DEFAULT_REQUEST_TIMEOUT_MS
        return timeout_ms / 1000

    def is_complete(self) -> bool:
        """True when both required credentials are present."""
        return bool(self.api_token and self.phone_number_id)

    def validate(self) -> None:
        """
        Ensure the required credentials are present.

        Raises:
            WhatsAppConfigurationError: If the token or phone number ID is missing
        """
        if not self.api_token:
            raise WhatsAppConfigurationError("WhatsApp API token is required")
        if not self.phone_number_id:
            raise WhatsAppConfigurationError("WhatsApp phone number ID is required")


def _parse_number(env_var: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise WhatsAppConfigurationError(
            f"{env_var} must be a number, got {raw!r}",
            details={"variable": env_var},
        )


def load_config(
    overrides: WhatsAppConfig | Mapping[str, Any] | None = None,
) -> WhatsAppConfig:
    """
    Resolve configuration from optional overrides and the environment.

    Args:
        overrides: Explicit settings, as a WhatsAppConfig or a plain mapping

    Returns:
        Fully resolved WhatsAppConfig (credentials not yet validated)
    """
    if overrides is None:
        config = WhatsAppConfig()
    elif isinstance(overrides, WhatsAppConfig):
        config = overrides
    else:
        config = WhatsAppConfig.from_mapping(overrides)
    return config.resolve()
