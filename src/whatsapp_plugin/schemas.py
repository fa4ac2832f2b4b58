"""
WhatsApp Tool Parameters

Pydantic models for the parameters of every tool, keyed by tool name.
The tool manifests shown to the agent runtime are derived from these
models, and tool calls are validated against them once, on entry.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from whatsapp_plugin.errors import WhatsAppValidationError
from whatsapp_plugin.host import PARAMETER_TYPES, ToolParameter
from whatsapp_plugin.types import (
    InteractiveMessageOptions,
    LocationMessageOptions,
    MediaMessageOptions,
    TemplateMessageOptions,
)

RECIPIENT_DESCRIPTION = 'Phone number of the recipient with country code (e.g., "+1234567890")'


class ToolName(str, Enum):
    """Names of the tools exposed by the plugin."""

    SEND_MESSAGE = "whatsapp_send_message"
    SEND_TEMPLATE = "whatsapp_send_template"
    SEND_MEDIA = "whatsapp_send_media"
    SEND_INTERACTIVE = "whatsapp_send_interactive"
    SEND_LOCATION = "whatsapp_send_location"
    MARK_AS_READ = "whatsapp_mark_as_read"
    GET_CONTACT_INFO = "whatsapp_get_contact_info"
    GET_BUSINESS_PROFILE = "whatsapp_get_business_profile"
    UPDATE_BUSINESS_PROFILE = "whatsapp_update_business_profile"


class ToolParams(BaseModel):
    """Base for tool parameter models. Field aliases are the wire names."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @classmethod
    def missing_from(cls, params: dict[str, Any]) -> list[str]:
        """Names of required parameters that are absent, None or empty."""
        missing = []
        for name, field in cls.model_fields.items():
            if not field.is_required():
                continue
            key = field.alias or name
            value = params.get(key, params.get(name))
            if value is None or value == "":
                missing.append(key)
        return missing

    @classmethod
    def parse(cls, tool_name: str, params: dict[str, Any]) -> "ToolParams":
        """
        Validate raw tool parameters.

        Raises:
            WhatsAppValidationError: Missing required parameters or wrong types
        """
        missing = cls.missing_from(params)
        if missing:
            raise WhatsAppValidationError.missing_parameters(missing)

        try:
            return cls.model_validate(params)
        except PydanticValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise WhatsAppValidationError(
                f"Invalid parameters for {tool_name}: {problems}",
                details={"errors": e.errors(include_url=False)},
            ) from e

    @classmethod
    def tool_parameters(cls) -> list[ToolParameter]:
        """Describe this model as runtime tool parameters."""
        properties = cls.model_json_schema(by_alias=True).get("properties", {})
        result = []
        for name, field in cls.model_fields.items():
            key = field.alias or name
            result.append(
                ToolParameter(
                    name=key,
                    type=_schema_type(properties.get(key, {})),
                    description=field.description or "",
                    required=field.is_required(),
                )
            )
        return result

    @classmethod
    def json_schema(cls) -> dict[str, Any]:
        """OpenAPI-style object schema used by chat function-calling."""
        parameters = cls.tool_parameters()
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {
                p.name: {"type": p.type, "description": p.description} for p in parameters
            },
        }
        required = [p.name for p in parameters if p.required]
        if required:
            schema["required"] = required
        return schema


def _schema_type(prop: dict[str, Any]) -> str:
    """Map a JSON schema property to one of the runtime parameter types."""
    schema_type = prop.get("type")
    if schema_type is None:
        for option in prop.get("anyOf", []):
            if option.get("type") not in (None, "null"):
                schema_type = option["type"]
                break
    if schema_type == "integer":
        schema_type = "number"
    return schema_type if schema_type in PARAMETER_TYPES else "string"


class SendMessageParams(ToolParams):
    """Parameters for whatsapp_send_message."""

    to: str = Field(..., description=RECIPIENT_DESCRIPTION)
    message: str = Field(..., description="Text message to send")


class SendTemplateParams(ToolParams):
    """Parameters for whatsapp_send_template."""

    to: str = Field(..., description=RECIPIENT_DESCRIPTION)
    template_name: str = Field(..., alias="templateName", description="Name of the template to use")
    language: str = Field(..., description='Language code of the template (e.g., "en_US")')
    components: list[dict[str, Any]] | None = Field(
        None, description="Template components containing parameters"
    )

    def to_options(self) -> TemplateMessageOptions:
        return TemplateMessageOptions(
            to=self.to,
            template_name=self.template_name,
            language=self.language,
            components=list(self.components or []),
        )


class SendMediaParams(ToolParams):
    """Parameters for whatsapp_send_media."""

    to: str = Field(..., description=RECIPIENT_DESCRIPTION)
    type: str = Field(..., description="Type of media (image, document, audio, video, sticker)")
    url: str | None = Field(None, description="URL to the media file")
    file_path: str | None = Field(
        None, alias="filePath", description="Path to the media file (alternative to URL)"
    )
    caption: str | None = Field(None, description="Optional caption for the media")
    filename: str | None = Field(None, description="Filename for document type media")

    def to_options(self) -> MediaMessageOptions:
        return MediaMessageOptions(
            to=self.to,
            type=self.type,
            url=self.url,
            file_path=self.file_path,
            caption=self.caption,
            filename=self.filename,
        )


class SendInteractiveParams(ToolParams):
    """Parameters for whatsapp_send_interactive."""

    to: str = Field(..., description=RECIPIENT_DESCRIPTION)
    type: str = Field(
        ..., description="Type of interactive message (button, list, product, product_list)"
    )
    body: dict[str, Any] = Field(..., description="Body content of the message containing text")
    header: dict[str, Any] | None = Field(None, description="Optional header for the message")
    footer: dict[str, Any] | None = Field(None, description="Optional footer for the message")
    action: dict[str, Any] = Field(
        ...,
        description="Action content for the interactive message (buttons, sections, etc.)",
    )

    def to_options(self) -> InteractiveMessageOptions:
        return InteractiveMessageOptions(
            to=self.to,
            type=self.type,
            body=dict(self.body),
            action=dict(self.action),
            header=self.header,
            footer=self.footer,
        )


class SendLocationParams(ToolParams):
    """Parameters for whatsapp_send_location."""

    to: str = Field(..., description=RECIPIENT_DESCRIPTION)
    latitude: float = Field(..., description="Latitude coordinate of the location")
    longitude: float = Field(..., description="Longitude coordinate of the location")
    name: str | None = Field(None, description="Optional name of the location")
    address: str | None = Field(None, description="Optional address of the location")

    def to_options(self) -> LocationMessageOptions:
        return LocationMessageOptions(
            to=self.to,
            latitude=self.latitude,
            longitude=self.longitude,
            name=self.name,
            address=self.address,
        )


class MarkAsReadParams(ToolParams):
    """Parameters for whatsapp_mark_as_read."""

    message_id: str = Field(
        ..., alias="messageId", description="ID of the message to mark as read"
    )


class GetContactInfoParams(ToolParams):
    """Parameters for whatsapp_get_contact_info."""

    phone_number: str = Field(
        ...,
        alias="phoneNumber",
        description='Phone number with country code (e.g., "+1234567890")',
    )


class GetBusinessProfileParams(ToolParams):
    """whatsapp_get_business_profile takes no parameters."""


class UpdateBusinessProfileParams(ToolParams):
    """Parameters for whatsapp_update_business_profile. All optional."""

    about: str | None = Field(None, description="About text for the business profile")
    address: str | None = Field(None, description="Business address")
    description: str | None = Field(None, description="Business description")
    email: str | None = Field(None, description="Business email")
    websites: list[str] | None = Field(None, description="Business websites")
    vertical: str | None = Field(None, description="Business category/vertical")

    def profile_data(self) -> dict[str, Any]:
        """Only the fields the caller actually provided."""
        return self.model_dump(exclude_none=True)
