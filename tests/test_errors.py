"""
Tests for Graph API error parsing.
"""

import httpx

from whatsapp_plugin.errors import (
    ErrorKind,
    ToolNotFoundError,
    WhatsAppApiError,
    WhatsAppValidationError,
    api_error_from_response,
    parse_api_error,
)


class TestParseApiError:
    """Tests for parse_api_error."""

    def test_full_vendor_error(self):
        """Every vendor field is kept and appears in the message."""
        body = {
            "error": {
                "message": "(#131009) Parameter value is not valid",
                "type": "OAuthException",
                "code": 131009,
                "error_subcode": 2494010,
                "error_user_title": "Invalid number",
                "error_user_msg": "Check the recipient",
            }
        }

        error = parse_api_error("Error sending message", 400, body)

        assert isinstance(error, WhatsAppApiError)
        assert error.kind == ErrorKind.API
        assert error.status_code == 400
        assert error.error_code == 131009
        assert error.error_subcode == 2494010
        assert error.error_user_title == "Invalid number"
        assert error.error_user_msg == "Check the recipient"
        assert str(error) == (
            "Error sending message: HTTP 400 - 131009: (#131009) Parameter value is not valid"
            " (subcode: 2494010) - Invalid number: Check the recipient"
        )

    def test_code_and_message_only(self):
        body = {"error": {"message": "Invalid OAuth access token", "code": 190}}

        error = parse_api_error("Error getting business profile", 401, body)

        assert str(error) == "Error getting business profile: HTTP 401 - 190: Invalid OAuth access token"
        assert error.error_subcode is None
        assert error.details == body["error"]

    def test_body_without_error_object(self):
        """Non-vendor bodies still produce the action and status."""
        error = parse_api_error("Error uploading media", 502, "Bad Gateway")

        assert str(error) == "Error uploading media: HTTP 502"
        assert error.error_code is None
        assert error.details == {}

    def test_from_non_json_response(self):
        response = httpx.Response(500, text="<html>oops</html>")

        error = api_error_from_response("Error sending message", response)

        assert error.status_code == 500
        assert str(error) == "Error sending message: HTTP 500"


class TestErrorTypes:
    def test_missing_parameters_message(self):
        error = WhatsAppValidationError.missing_parameters(["to", "message"])

        assert str(error) == "Missing required parameters: to, message"
        assert error.missing == ["to", "message"]
        assert error.kind == ErrorKind.VALIDATION

    def test_single_missing_parameter(self):
        error = WhatsAppValidationError.missing_parameters(["messageId"])

        assert str(error) == "Missing required parameter: messageId"

    def test_tool_not_found(self):
        error = ToolNotFoundError("whatsapp_fly")

        assert str(error) == "Tool whatsapp_fly not found"
        assert error.name == "whatsapp_fly"
        assert error.kind == ErrorKind.PLUGIN
