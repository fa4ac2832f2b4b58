"""
WhatsApp Cloud API Plugin

Tools for agent runtimes backed by the WhatsApp Business Cloud API.
"""

from whatsapp_plugin.client import WhatsAppClient
from whatsapp_plugin.config import WhatsAppConfig
from whatsapp_plugin.errors import (
    ErrorKind,
    ToolNotFoundError,
    WhatsAppApiError,
    WhatsAppConfigurationError,
    WhatsAppError,
    WhatsAppPluginError,
    WhatsAppResponseError,
    WhatsAppValidationError,
)
from whatsapp_plugin.host import PluginInstance, ToolDescriptor, ToolParameter
from whatsapp_plugin.plugin import PluginState, WhatsAppPlugin
from whatsapp_plugin.types import (
    Contact,
    InteractiveMessageOptions,
    LocationMessageOptions,
    MediaMessageOptions,
    MediaType,
    TemplateComponent,
    TemplateMessageOptions,
    TemplateParameter,
    WhatsAppMessage,
)

__all__ = [
    "WhatsAppPlugin",
    "WhatsAppClient",
    "WhatsAppConfig",
    "PluginInstance",
    "PluginState",
    "ToolDescriptor",
    "ToolParameter",
    "Contact",
    "WhatsAppMessage",
    "MediaType",
    "TemplateParameter",
    "TemplateComponent",
    "TemplateMessageOptions",
    "MediaMessageOptions",
    "InteractiveMessageOptions",
    "LocationMessageOptions",
    "ErrorKind",
    "WhatsAppError",
    "WhatsAppConfigurationError",
    "WhatsAppValidationError",
    "WhatsAppApiError",
    "WhatsAppResponseError",
    "WhatsAppPluginError",
    "ToolNotFoundError",
]
