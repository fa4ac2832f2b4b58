"""
Tests for the whatsapp-plugin CLI.

Only commands that never reach the network are exercised here.
"""

import pytest
from rich.console import Console
from typer.testing import CliRunner

from whatsapp_plugin.cli import main as cli_main
from whatsapp_plugin.cli.main import app

runner = CliRunner()


def _flat(output: str) -> str:
    """Collapse rich line wrapping so assertions ignore terminal width."""
    return " ".join(output.split())


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    monkeypatch.setenv("COLUMNS", "200")
    monkeypatch.setattr(cli_main, "console", Console(width=200))


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setenv("WHATSAPP_API_TOKEN", "test-token")
    monkeypatch.setenv("WHATSAPP_PHONE_NUMBER_ID", "123456789")


class TestToolsCommand:
    def test_lists_catalog_without_credentials(self):
        result = runner.invoke(app, ["tools"])

        assert result.exit_code == 0
        assert "whatsapp_send_message" in result.output
        assert "whatsapp_update_business_profile" in result.output
        assert "templateName" in result.output


class TestDebugCommand:
    def test_ready(self, credentials):
        result = runner.invoke(app, ["debug"])

        output = _flat(result.output)
        assert result.exit_code == 0
        assert "Plugin whatsapp is ready" in output
        assert "Tools registered: 9" in output

    def test_missing_credentials(self):
        result = runner.invoke(app, ["debug"])

        assert result.exit_code == 1
        assert "WhatsApp API token is required" in _flat(result.output)


class TestCallCommand:
    """Tests for executing a tool from the command line."""

    def test_invalid_json(self, credentials):
        result = runner.invoke(app, ["call", "whatsapp_send_message", "--params", "{to:"])

        assert result.exit_code == 1
        assert "Invalid JSON parameters" in _flat(result.output)

    def test_params_must_be_object(self, credentials):
        result = runner.invoke(app, ["call", "whatsapp_send_message", "-p", "[1, 2]"])

        assert result.exit_code == 1
        assert "Parameters must be a JSON object" in _flat(result.output)

    def test_unknown_tool(self, credentials):
        result = runner.invoke(app, ["call", "whatsapp_teleport"])

        assert result.exit_code == 1
        assert "Tool whatsapp_teleport not found" in _flat(result.output)

    def test_validation_error(self, credentials):
        result = runner.invoke(app, ["call", "whatsapp_send_message", "-p", '{"to": "+1234567890"}'])

        output = _flat(result.output)
        assert result.exit_code == 1
        assert "validation error" in output
        assert "Missing required parameter: message" in output

    def test_contact_info(self, credentials):
        result = runner.invoke(
            app, ["call", "whatsapp_get_contact_info", "-p", '{"phoneNumber": "+1234567890"}']
        )

        assert result.exit_code == 0
        assert '"id": "1234567890"' in result.output

    def test_initialization_failure(self):
        result = runner.invoke(app, ["call", "whatsapp_get_business_profile"])

        output = _flat(result.output)
        assert result.exit_code == 1
        assert "plugin error" in output
        assert "WhatsApp plugin initialization failed" in output
