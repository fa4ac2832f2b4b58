"""
WhatsApp Payload Builders

Pure functions turning message intents into Cloud API request bodies.
Field names follow the Graph API messages endpoint exactly.
"""

import re
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any

from whatsapp_plugin.errors import WhatsAppValidationError
from whatsapp_plugin.types import (
    InteractiveMessageOptions,
    LocationMessageOptions,
    MediaMessageOptions,
    MediaType,
    TemplateComponent,
    TemplateMessageOptions,
    TemplateParameter,
)

MESSAGING_PRODUCT = "whatsapp"

_NON_DIGITS = re.compile(r"\D")

# camelCase keys accepted from tool callers -> Graph API keys.
# Every other key of an interactive action is passed through unchanged.
_ACTION_KEYS = {
    "catalogId": "catalog_id",
    "productRetailerId": "product_retailer_id",
}


def format_phone_number(phone_number: str) -> str:
    """
    Normalize a recipient number for the `to` field.

    A leading "+" is stripped and the rest kept as is; otherwise every
    non-digit character is removed.
    """
    if phone_number.startswith("+"):
        return phone_number[1:]
    return _NON_DIGITS.sub("", phone_number)


def build_base_payload(to: str, message_type: str) -> dict[str, Any]:
    """Envelope shared by every outbound message."""
    if not to:
        raise WhatsAppValidationError.missing_parameters(["to"])
    return {
        "messaging_product": MESSAGING_PRODUCT,
        "recipient_type": "individual",
        "to": format_phone_number(to),
        "type": message_type,
    }


def build_text_payload(to: str, body: str) -> dict[str, Any]:
    payload = build_base_payload(to, "text")
    payload["text"] = {"body": body}
    return payload


def build_template_payload(options: TemplateMessageOptions) -> dict[str, Any]:
    """Build a template message body."""
    missing = [
        name
        for name, value in (
            ("templateName", options.template_name),
            ("language", options.language),
        )
        if not value
    ]
    if missing:
        raise WhatsAppValidationError.missing_parameters(missing)

    payload = build_base_payload(options.to, "template")
    payload["template"] = {
        "name": options.template_name,
        "language": {"code": options.language},
    }

    if options.components:
        payload["template"]["components"] = [
            _serialize_component(component) for component in options.components
        ]

    return payload


def build_media_payload(
    options: MediaMessageOptions,
    media_id: str | None = None,
) -> dict[str, Any]:
    """
    Build a media message body.

    Args:
        options: Media message options
        media_id: ID returned by a previous upload; wins over options.url

    Raises:
        WhatsAppValidationError: Unknown media type, or no media source
    """
    media_type = media_type_name(options.type)
    payload = build_base_payload(options.to, media_type)

    if media_id:
        media: dict[str, Any] = {"id": media_id}
    elif options.url:
        media = {"link": options.url}
    else:
        raise WhatsAppValidationError(
            "Either filePath or url must be provided",
            missing=["url", "filePath"],
        )

    if options.caption:
        media["caption"] = options.caption

    if media_type == MediaType.DOCUMENT.value and options.filename:
        media["filename"] = options.filename

    payload[media_type] = media
    return payload


def build_interactive_payload(options: InteractiveMessageOptions) -> dict[str, Any]:
    """Build an interactive (button, list, product) message body."""
    missing = [
        name
        for name, value in (
            ("type", options.type),
            ("body", options.body),
            ("action", options.action),
        )
        if not value
    ]
    if missing:
        raise WhatsAppValidationError.missing_parameters(missing)

    interactive: dict[str, Any] = {
        "type": _enum_value(options.type),
        "body": options.body,
    }

    if options.header:
        interactive["header"] = options.header

    if options.footer:
        interactive["footer"] = options.footer

    # Action body is passed through apart from the catalog keys
    interactive["action"] = {
        _ACTION_KEYS.get(key, key): value for key, value in options.action.items()
    }

    payload = build_base_payload(options.to, "interactive")
    payload["interactive"] = interactive
    return payload


def build_location_payload(options: LocationMessageOptions) -> dict[str, Any]:
    """Build a location message body."""
    location: dict[str, Any] = {
        "latitude": options.latitude,
        "longitude": options.longitude,
    }

    if options.name:
        location["name"] = options.name

    if options.address:
        location["address"] = options.address

    payload = build_base_payload(options.to, "location")
    payload["location"] = location
    return payload


def build_read_receipt_payload(message_id: str) -> dict[str, Any]:
    if not message_id:
        raise WhatsAppValidationError.missing_parameters(["messageId"])
    return {
        "messaging_product": MESSAGING_PRODUCT,
        "status": "read",
        "message_id": message_id,
    }


def build_profile_update_payload(profile_data: dict[str, Any]) -> dict[str, Any]:
    """Merge caller fields into a business profile update body."""
    return {"messaging_product": MESSAGING_PRODUCT, **profile_data}


def media_type_name(value: MediaType | str) -> str:
    """Lowercased media type, rejecting anything outside MediaType."""
    media_type = _enum_value(value).lower()
    if media_type not in {member.value for member in MediaType}:
        allowed = ", ".join(member.value for member in MediaType)
        raise WhatsAppValidationError(
            f"Unsupported media type: {media_type} (expected one of {allowed})"
        )
    return media_type


def _enum_value(value: Enum | str) -> str:
    return value.value if isinstance(value, Enum) else value


def _serialize_component(component: TemplateComponent | dict[str, Any]) -> dict[str, Any]:
    if not is_dataclass(component):
        return component

    data: dict[str, Any] = {"type": component.type}
    if component.sub_type:
        data["sub_type"] = component.sub_type
    if component.index is not None:
        data["index"] = component.index
    if component.text:
        data["text"] = component.text
    if component.parameters:
        data["parameters"] = [_serialize_parameter(p) for p in component.parameters]
    return data


def _serialize_parameter(parameter: TemplateParameter | dict[str, Any]) -> dict[str, Any]:
    if not is_dataclass(parameter):
        return parameter
    return {key: value for key, value in asdict(parameter).items() if value is not None}
