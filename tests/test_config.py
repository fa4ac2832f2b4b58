"""
Tests for configuration resolution.
"""

import pytest

from whatsapp_plugin.config import WhatsAppConfig, load_config
from whatsapp_plugin.errors import WhatsAppConfigurationError


class TestLoadConfig:
    """Tests for explicit -> environment -> default precedence."""

    def test_defaults(self):
        config = load_config()

        assert config.api_version == "v17.0"
        assert config.api_token is None
        assert config.phone_number_id is None
        assert config.cache_message_seconds == 300
        assert config.cache_contact_seconds == 3600
        assert config.request_timeout == 30000
        assert config.cache_max_entries == 1000
        assert config.api_base_url == "https://graph.facebook.com/v17.0"
        assert config.timeout_seconds == 30.0

    def test_environment_fills_unset_fields(self, monkeypatch):
        monkeypatch.setenv("WHATSAPP_API_TOKEN", "env-token")
        monkeypatch.setenv("WHATSAPP_PHONE_NUMBER_ID", "555")
        monkeypatch.setenv("WHATSAPP_API_VERSION", "v19.0")
        monkeypatch.setenv("CACHE_CONTACT_SECONDS", "60")
        monkeypatch.setenv("DEFAULT_REQUEST_TIMEOUT", "5000")

        config = load_config()

        assert config.api_token == "env-token"
        assert config.phone_number_id == "555"
        assert config.cache_contact_seconds == 60
        assert config.timeout_seconds == 5.0
        assert config.api_base_url == "https://graph.facebook.com/v19.0"

    def test_explicit_values_win(self, monkeypatch):
        monkeypatch.setenv("WHATSAPP_API_TOKEN", "env-token")
        monkeypatch.setenv("CACHE_MESSAGE_SECONDS", "10")

        config = load_config(WhatsAppConfig(api_token="explicit", cache_message_seconds=20))

        assert config.api_token == "explicit"
        assert config.cache_message_seconds == 20

    def test_mapping_ignores_unknown_keys(self):
        config = load_config({"api_token": "t", "phone_number_id": "1", "colour": "green"})

        assert config.api_token == "t"
        assert config.is_complete()

    def test_empty_explicit_value_falls_back_to_environment(self, monkeypatch):
        monkeypatch.setenv("WHATSAPP_API_TOKEN", "env-token")

        config = load_config({"api_token": "", "phone_number_id": "1"})

        assert config.api_token == "env-token"
        config.validate()

    def test_empty_environment_value_falls_back_to_default(self, monkeypatch):
        monkeypatch.setenv("WHATSAPP_API_VERSION", "")

        assert load_config().api_version == "v17.0"

    def test_invalid_number_in_environment(self, monkeypatch):
        monkeypatch.setenv("CACHE_MESSAGE_SECONDS", "five minutes")

        with pytest.raises(WhatsAppConfigurationError, match="CACHE_MESSAGE_SECONDS"):
            load_config()

    def test_custom_base_url(self):
        config = load_config({"base_url": "http://localhost:8080/", "api_version": "v20.0"})

        assert config.api_base_url == "http://localhost:8080/v20.0"


class TestValidate:
    def test_token_required(self):
        with pytest.raises(WhatsAppConfigurationError, match="WhatsApp API token is required"):
            load_config({"phone_number_id": "123"}).validate()

    def test_phone_number_id_required(self):
        with pytest.raises(
            WhatsAppConfigurationError, match="WhatsApp phone number ID is required"
        ):
            load_config({"api_token": "token"}).validate()

    def test_complete(self):
        config = load_config({"api_token": "token", "phone_number_id": "123"})

        config.validate()
        assert config.is_complete()
