"""
WhatsApp Plugin Errors

Every error raised by the package derives from WhatsAppError and carries an
ErrorKind, so callers can branch on the kind instead of parsing messages.
"""

from enum import Enum
from typing import Any

import httpx


class ErrorKind(str, Enum):
    """Categories of failures."""

    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    API = "api"
    RESPONSE = "response"
    PLUGIN = "plugin"


class WhatsAppError(Exception):
    """Base error for the WhatsApp plugin."""

    kind: ErrorKind = ErrorKind.PLUGIN

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class WhatsAppConfigurationError(WhatsAppError):
    """Required credentials are missing or a setting is malformed."""

    kind = ErrorKind.CONFIGURATION


class WhatsAppValidationError(WhatsAppError):
    """Tool parameters or message options failed validation."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        missing: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.missing = missing or []

    @classmethod
    def missing_parameters(cls, names: list[str]) -> "WhatsAppValidationError":
        """Build the error for absent required parameters."""
        noun = "parameter" if len(names) == 1 else "parameters"
        return cls(f"Missing required {noun}: {', '.join(names)}", missing=list(names))


class WhatsAppApiError(WhatsAppError):
    """The Cloud API answered with an HTTP error status."""

    kind = ErrorKind.API

    def __init__(
        self,
        message: str,
        status_code: int,
        error_code: int | str | None = None,
        error_subcode: int | str | None = None,
        error_user_title: str | None = None,
        error_user_msg: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code
        self.error_code = error_code
        self.error_subcode = error_subcode
        self.error_user_title = error_user_title
        self.error_user_msg = error_user_msg


class WhatsAppResponseError(WhatsAppError):
    """The Cloud API response lacks a field the operation needs."""

    kind = ErrorKind.RESPONSE


class WhatsAppPluginError(WhatsAppError):
    """Plugin lifecycle failure (not initialized, initialization failed)."""

    kind = ErrorKind.PLUGIN


class ToolNotFoundError(WhatsAppPluginError):
    """No tool is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(f"Tool {name} not found")
        self.name = name


def parse_api_error(action: str, status_code: int, body: Any) -> WhatsAppApiError:
    """
    Build a WhatsAppApiError from a failed response.

    Graph API errors look like:
    {
        "error": {
            "message": "...",
            "type": "OAuthException",
            "code": 190,
            "error_subcode": 463,
            "error_user_title": "...",
            "error_user_msg": "..."
        }
    }

    Args:
        action: Human description of the failed operation
        status_code: HTTP status of the response
        body: Decoded JSON body, or anything else when it was not JSON

    Returns:
        WhatsAppApiError with the composed message and vendor fields
    """
    message = f"{action}: HTTP {status_code}"
    error = body.get("error") if isinstance(body, dict) else None

    if not isinstance(error, dict):
        return WhatsAppApiError(message, status_code=status_code)

    code = error.get("code")
    api_message = error.get("message")
    subcode = error.get("error_subcode")
    user_title = error.get("error_user_title")
    user_msg = error.get("error_user_msg")

    message += f" - {code if code is not None else ''}: {api_message or ''}"
    if subcode:
        message += f" (subcode: {subcode})"
    if user_title or user_msg:
        message += f" - {user_title or ''}: {user_msg or ''}"

    return WhatsAppApiError(
        message,
        status_code=status_code,
        error_code=code,
        error_subcode=subcode,
        error_user_title=user_title,
        error_user_msg=user_msg,
        details=error,
    )


def api_error_from_response(action: str, response: httpx.Response) -> WhatsAppApiError:
    """Decode the body of a failed httpx response and parse it."""
    try:
        body = response.json()
    except ValueError:
        body = None
    return parse_api_error(action, response.status_code, body)
