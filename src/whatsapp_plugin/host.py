"""
Host Plugin Interface

Abstract contract between a tool plugin and the agent runtime hosting it.
The runtime loads the plugin, calls init() before a session, lists its
tools, executes them by name, and calls cleanup() on teardown.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Literal

ParameterType = Literal["string", "number", "boolean", "object", "array"]

PARAMETER_TYPES: tuple[str, ...] = ("string", "number", "boolean", "object", "array")

ToolExecutor = Callable[[dict[str, Any]], Awaitable[Any]]


@dataclass(frozen=True)
class ToolParameter:
    """A single parameter of a tool, as shown to the runtime."""

    name: str
    type: ParameterType
    description: str = ""
    required: bool = False


@dataclass
class ToolDescriptor:
    """
    A callable tool.

    The runtime presents `name`, `description` and `parameters` to the
    model and awaits `execute(params)` when the model calls the tool.
    """

    name: str
    description: str
    parameters: list[ToolParameter]
    execute: ToolExecutor

    @property
    def required_parameters(self) -> list[str]:
        return [p.name for p in self.parameters if p.required]


@dataclass
class PluginConfig:
    """Plugin identity and its exposed tools."""

    name: str
    description: str
    version: str
    tools: list[ToolDescriptor] = field(default_factory=list)


class PluginInstance(ABC):
    """
    Abstract interface for tool plugins.

    Implementations must provide:
    - Identity (name, description, config)
    - Lifecycle hooks (init, cleanup)
    - Tool listing and execution by name
    """

    name: str
    description: str
    config: PluginConfig

    @abstractmethod
    async def init(self) -> None:
        """
        Prepare the plugin for use.

        Raises:
            Exception: Initialization is fatal; the runtime must not
                execute tools of a plugin whose init() failed
        """
        ...

    @abstractmethod
    async def cleanup(self) -> None:
        """Release resources acquired by init()."""
        ...

    @abstractmethod
    def get_tools(self) -> list[ToolDescriptor]:
        """Return the tools currently exposed."""
        ...

    @abstractmethod
    async def execute_tool(self, name: str, params: dict[str, Any]) -> Any:
        """
        Execute a tool by name.

        Args:
            name: Registered tool name
            params: Tool parameters from the model

        Returns:
            Tool result, JSON-serializable
        """
        ...
