"""
WhatsApp Wire Types

Typed descriptions of the message intents and records exchanged with the
WhatsApp Cloud API. These carry no network behavior; the payload builders
turn them into the Cloud API JSON envelopes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MediaType(str, Enum):
    """Media kinds accepted by the messages endpoint."""

    IMAGE = "image"
    DOCUMENT = "document"
    AUDIO = "audio"
    VIDEO = "video"
    STICKER = "sticker"


class InteractiveType(str, Enum):
    """Interactive message kinds."""

    BUTTON = "button"
    LIST = "list"
    PRODUCT = "product"
    PRODUCT_LIST = "product_list"


@dataclass
class Contact:
    """
    WhatsApp contact.

    The Cloud API has no contact lookup endpoint, so only `id` is ever
    populated; the remaining fields exist for hosts that fill them in.
    """

    id: str  # Phone number with country code, digits only
    name: str | None = None
    is_business: bool | None = None
    profile_picture_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Tool-facing representation, absent fields dropped."""
        data = {
            "id": self.id,
            "name": self.name,
            "isBusiness": self.is_business,
            "profilePictureUrl": self.profile_picture_url,
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass
class WhatsAppMessage:
    """
    A message known to the client.

    Outbound messages are recorded after the API accepts them.
    """

    id: str
    body: str
    timestamp: float
    type: str
    from_: str
    to: str | None = None
    context: dict[str, str] | None = None  # Replied-to message
    media: dict[str, Any] | None = None


@dataclass(frozen=True)
class TemplateParameter:
    """A parameter value inside a template component."""

    type: str  # text, currency, date_time, image, document, video
    text: str | None = None
    currency: dict[str, Any] | None = None
    date_time: dict[str, Any] | None = None
    image: dict[str, Any] | None = None
    document: dict[str, Any] | None = None
    video: dict[str, Any] | None = None


@dataclass(frozen=True)
class TemplateComponent:
    """A component of a template (header, body, button, footer)."""

    type: str
    parameters: list[TemplateParameter | dict[str, Any]] = field(default_factory=list)
    sub_type: str | None = None  # quick_reply, url (button components)
    index: int | None = None
    text: str | None = None


@dataclass(frozen=True)
class TemplateMessageOptions:
    """Options for sending an approved template."""

    to: str
    template_name: str
    language: str
    components: list[TemplateComponent | dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class MediaMessageOptions:
    """
    Options for sending a media message.

    Exactly one source ends up in the payload: an uploaded `file_path`
    takes precedence over `url`.
    """

    to: str
    type: MediaType | str
    url: str | None = None
    file_path: str | None = None
    caption: str | None = None
    filename: str | None = None  # Documents only


@dataclass(frozen=True)
class InteractiveMessageOptions:
    """Options for sending buttons, lists or catalog products."""

    to: str
    type: InteractiveType | str
    body: dict[str, Any]
    action: dict[str, Any]
    header: dict[str, Any] | None = None
    footer: dict[str, Any] | None = None


@dataclass(frozen=True)
class LocationMessageOptions:
    """Options for sending a location pin."""

    to: str
    latitude: float
    longitude: float
    name: str | None = None
    address: str | None = None
