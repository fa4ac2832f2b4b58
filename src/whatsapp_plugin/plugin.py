"""
WhatsApp Plugin

Exposes the WhatsApp Cloud API client to an agent runtime as a catalog of
tools. A static table maps each tool name to its parameter model and its
handler; the runtime-facing descriptors and manifests are built from it.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping

import httpx

from whatsapp_plugin.client import WhatsAppClient
from whatsapp_plugin.config import WhatsAppConfig
from whatsapp_plugin.errors import (
    ToolNotFoundError,
    WhatsAppConfigurationError,
    WhatsAppPluginError,
)
from whatsapp_plugin.host import PluginConfig, PluginInstance, ToolDescriptor
from whatsapp_plugin.schemas import (
    GetBusinessProfileParams,
    GetContactInfoParams,
    MarkAsReadParams,
    SendInteractiveParams,
    SendLocationParams,
    SendMediaParams,
    SendMessageParams,
    SendTemplateParams,
    ToolName,
    ToolParams,
    UpdateBusinessProfileParams,
)

logger = logging.getLogger(__name__)

PLUGIN_NAME = "whatsapp"
PLUGIN_DESCRIPTION = "WhatsApp Cloud API integration for agents"
PLUGIN_VERSION = "1.0.0"

ToolHandler = Callable[[WhatsAppClient, Any], Awaitable[Any]]


class PluginState(str, Enum):
    """Lifecycle states of a plugin instance."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class ToolSpec:
    """A tool name bound to its parameter model and handler."""

    name: ToolName
    description: str
    params_model: type[ToolParams]
    handler: ToolHandler


async def _send_message(client: WhatsAppClient, params: SendMessageParams) -> dict[str, Any]:
    message_id = await client.send_message(params.to, params.message)
    return {"success": True, "messageId": message_id}


async def _send_template(client: WhatsAppClient, params: SendTemplateParams) -> dict[str, Any]:
    message_id = await client.send_template_message(params.to_options())
    return {"success": True, "messageId": message_id}


async def _send_media(client: WhatsAppClient, params: SendMediaParams) -> dict[str, Any]:
    message_id = await client.send_media(params.to_options())
    return {"success": True, "messageId": message_id}


async def _send_interactive(
    client: WhatsAppClient, params: SendInteractiveParams
) -> dict[str, Any]:
    message_id = await client.send_interactive_message(params.to_options())
    return {"success": True, "messageId": message_id}


async def _send_location(client: WhatsAppClient, params: SendLocationParams) -> dict[str, Any]:
    message_id = await client.send_location(params.to_options())
    return {"success": True, "messageId": message_id}


async def _mark_as_read(client: WhatsAppClient, params: MarkAsReadParams) -> dict[str, Any]:
    success = await client.mark_message_as_read(params.message_id)
    return {"success": success}


async def _get_contact_info(
    client: WhatsAppClient, params: GetContactInfoParams
) -> dict[str, Any]:
    contact = await client.get_contact_info(params.phone_number)
    return contact.to_dict()


async def _get_business_profile(
    client: WhatsAppClient, params: GetBusinessProfileParams
) -> dict[str, Any]:
    return await client.get_business_profile()


async def _update_business_profile(
    client: WhatsAppClient, params: UpdateBusinessProfileParams
) -> dict[str, Any]:
    success = await client.update_business_profile(params.profile_data())
    return {"success": success}


TOOL_SPECS: tuple[ToolSpec, ...] = (
    ToolSpec(
        ToolName.SEND_MESSAGE,
        "Send a WhatsApp text message to a contact",
        SendMessageParams,
        _send_message,
    ),
    ToolSpec(
        ToolName.SEND_TEMPLATE,
        "Send a template message to a contact",
        SendTemplateParams,
        _send_template,
    ),
    ToolSpec(
        ToolName.SEND_MEDIA,
        "Send a media message (image, document, etc.) to a contact",
        SendMediaParams,
        _send_media,
    ),
    ToolSpec(
        ToolName.SEND_INTERACTIVE,
        "Send an interactive message with buttons or lists",
        SendInteractiveParams,
        _send_interactive,
    ),
    ToolSpec(
        ToolName.SEND_LOCATION,
        "Send a location message",
        SendLocationParams,
        _send_location,
    ),
    ToolSpec(
        ToolName.MARK_AS_READ,
        "Mark a message as read",
        MarkAsReadParams,
        _mark_as_read,
    ),
    ToolSpec(
        ToolName.GET_CONTACT_INFO,
        "Get basic information about a contact",
        GetContactInfoParams,
        _get_contact_info,
    ),
    ToolSpec(
        ToolName.GET_BUSINESS_PROFILE,
        "Get information about your WhatsApp Business profile",
        GetBusinessProfileParams,
        _get_business_profile,
    ),
    ToolSpec(
        ToolName.UPDATE_BUSINESS_PROFILE,
        "Update your WhatsApp Business profile information",
        UpdateBusinessProfileParams,
        _update_business_profile,
    ),
)


def _detach(result: Any, params: dict[str, Any]) -> Any:
    """Never hand the caller's own params object back as a result."""
    if result is params and isinstance(params, dict):
        return dict(params)
    return result


class WhatsAppPlugin(PluginInstance):
    """
    WhatsApp Cloud API plugin.

    Tools are listed from construction, but executing one requires a
    successful init().
    """

    def __init__(
        self,
        config: WhatsAppConfig | Mapping[str, Any] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.name = PLUGIN_NAME
        self.description = PLUGIN_DESCRIPTION
        self.client: WhatsAppClient | None = None
        self.state = PluginState.UNINITIALIZED
        self.tools: dict[str, ToolDescriptor] = {}
        self.config = PluginConfig(
            name=PLUGIN_NAME,
            description=PLUGIN_DESCRIPTION,
            version=PLUGIN_VERSION,
        )

        self._whatsapp_config = config
        self._transport = transport

        self._initialize_tools()

    async def init(self) -> None:
        """
        Create the API client and register the tools.

        Raises:
            WhatsAppPluginError: Wrapping whatever made initialization fail
        """
        self.state = PluginState.INITIALIZING

        if self.client is not None:
            await self.client.close()
            self.client = None

        try:
            client = WhatsAppClient(self._whatsapp_config, transport=self._transport)

            if not client.is_configured():
                raise WhatsAppConfigurationError(
                    "WhatsApp client is not properly configured. "
                    "Check your API token and phone number ID."
                )

            self.client = client
            self._initialize_tools()
            self._log_tools_summary()

        except Exception as e:
            self.client = None
            self.state = PluginState.FAILED
            logger.error(f"Failed to initialize WhatsApp plugin: {e}")
            raise WhatsAppPluginError(f"WhatsApp plugin initialization failed: {e}") from e

        self.state = PluginState.READY
        logger.info("WhatsApp Cloud API plugin initialized successfully")

    async def cleanup(self) -> None:
        """Close the client and return to the uninitialized state."""
        if self.client is not None:
            await self.client.close()
        self.client = None
        self.state = PluginState.UNINITIALIZED

    async def initialize_all(self) -> None:
        await self.init()

    async def cleanup_all(self) -> None:
        await self.cleanup()

    def _log_tools_summary(self) -> None:
        tool_names = list(self.tools.keys())
        logger.info(
            f"Registered {len(tool_names)} tools: {', '.join(tool_names)}",
            extra={"plugin": self.name},
        )

    def _initialize_tools(self) -> None:
        """(Re)build descriptors for every tool in the static table."""
        for spec in TOOL_SPECS:
            self.tools[spec.name.value] = ToolDescriptor(
                name=spec.name.value,
                description=spec.description,
                parameters=spec.params_model.tool_parameters(),
                execute=self._make_executor(spec),
            )

        self.config.tools = list(self.tools.values())

    def _make_executor(self, spec: ToolSpec) -> Callable[[dict[str, Any]], Awaitable[Any]]:
        async def execute(params: dict[str, Any]) -> Any:
            if self.client is None:
                raise WhatsAppPluginError(
                    "WhatsApp client not initialized. Call init() first."
                )

            raw = params if params is not None else {}

            try:
                validated = spec.params_model.parse(spec.name.value, raw)
                result = await spec.handler(self.client, validated)
            except Exception as e:
                logger.error(
                    f"Error executing tool {spec.name.value}: {e}",
                    extra={"tool": spec.name.value},
                )
                raise

            return _detach(result, raw)

        return execute

    def get_chat_manifests(self) -> list[dict[str, Any]]:
        """Function-calling manifests for every built-in tool."""
        return [
            {
                "name": spec.name.value,
                "description": spec.description,
                "parameters": spec.params_model.json_schema(),
            }
            for spec in TOOL_SPECS
        ]

    def get_tools(self) -> list[ToolDescriptor]:
        return list(self.tools.values())

    def get_tool(self, name: str) -> ToolDescriptor | None:
        return self.tools.get(name)

    def register_tool(self, tool: ToolDescriptor) -> None:
        """Register a tool, replacing any tool with the same name."""
        self.tools[tool.name] = tool
        self.config.tools = list(self.tools.values())

    def remove_tool(self, name: str) -> bool:
        """Remove a tool. Returns False if it was not registered."""
        removed = self.tools.pop(name, None) is not None
        self.config.tools = list(self.tools.values())
        return removed

    def has_tool(self, name: str) -> bool:
        return name in self.tools

    def get_tool_count(self) -> int:
        return len(self.tools)

    async def execute_tool(self, name: str, params: dict[str, Any]) -> Any:
        """
        Execute a tool by name.

        Raises:
            ToolNotFoundError: If no tool is registered under name
        """
        tool = self.get_tool(name)
        if tool is None:
            raise ToolNotFoundError(name)

        result = await tool.execute(params)
        return _detach(result, params)

    def debug_plugin_interface(self) -> dict[str, Any]:
        """Log and return the plugin's identity and readiness."""
        info = {
            "name": self.name,
            "description": self.description,
            "client_initialized": self.client is not None,
            "tool_count": len(self.tools),
            "state": self.state.value,
        }
        logger.info(
            f"Plugin {self.name}: client initialized={info['client_initialized']}, "
            f"tools registered={info['tool_count']}",
            extra={"plugin": self.name, "plugin_state": self.state.value},
        )
        return info
