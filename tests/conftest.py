"""
Shared fixtures for the WhatsApp plugin tests.

No test talks to the network: every client and plugin is built on an
httpx.MockTransport that records requests and replays queued responses.
"""

import json
from typing import Any

import httpx
import pytest

from whatsapp_plugin.client import WhatsAppClient
from whatsapp_plugin.config import WhatsAppConfig
from whatsapp_plugin.plugin import WhatsAppPlugin

CONFIG_ENV_VARS = (
    "WHATSAPP_API_VERSION",
    "WHATSAPP_API_TOKEN",
    "WHATSAPP_PHONE_NUMBER_ID",
    "WHATSAPP_BUSINESS_ACCOUNT_ID",
    "WHATSAPP_CACHE_MAX_ENTRIES",
    "WHATSAPP_API_BASE_URL",
    "CACHE_MESSAGE_SECONDS",
    "CACHE_CONTACT_SECONDS",
    "DEFAULT_REQUEST_TIMEOUT",
)

API_ROOT = "https://graph.facebook.com/v17.0"
PHONE_NUMBER_ID = "123456789"


class FakeGraphAPI:
    """Records requests and answers them from a queue of responses."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._responses: list[httpx.Response | Exception] = []
        self.default = httpx.Response(200, json={"messages": [{"id": "wamid.TEST"}]})

    def queue(self, status_code: int = 200, json: Any = None, **kwargs: Any) -> None:
        self._responses.append(httpx.Response(status_code, json=json, **kwargs))

    def fail_with(self, error: Exception) -> None:
        self._responses.append(error)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            return self.default
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def json_body(self, index: int = -1) -> dict[str, Any]:
        return json.loads(self.requests[index].content)


class FakeClock:
    """Manually advanced clock for cache tests."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of config resolution."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def whatsapp_config():
    """Minimal valid configuration."""
    return WhatsAppConfig(api_token="test-token", phone_number_id=PHONE_NUMBER_ID)


@pytest.fixture
def graph_api():
    """Recording fake of the Graph API."""
    return FakeGraphAPI()


@pytest.fixture
def clock():
    return FakeClock(now=1000.0)


@pytest.fixture
def client(whatsapp_config, graph_api):
    """WhatsApp client wired to the fake Graph API."""
    return WhatsAppClient(whatsapp_config, transport=graph_api.transport)


@pytest.fixture
def plugin(whatsapp_config, graph_api):
    """Uninitialized plugin wired to the fake Graph API."""
    return WhatsAppPlugin(whatsapp_config, transport=graph_api.transport)
