"""
WhatsApp Plugin CLI

Command-line interface for inspecting and exercising the plugin.

Commands:
- tools: List the tool catalog
- debug: Initialize the plugin and show diagnostics
- call: Execute a tool with JSON parameters
- send-test: Send a test text message
"""

import asyncio
import json
import logging
from typing import Any, Optional

import httpx
import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from whatsapp_plugin.errors import WhatsAppError
from whatsapp_plugin.plugin import WhatsAppPlugin

app = typer.Typer(
    name="whatsapp-plugin",
    help="WhatsApp Cloud API plugin CLI",
)

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def _run_tool(name: str, params: dict[str, Any]) -> Any:
    plugin = WhatsAppPlugin()
    await plugin.init()
    try:
        return await plugin.execute_tool(name, params)
    finally:
        await plugin.cleanup()


def _execute(name: str, params: dict[str, Any]) -> Any:
    try:
        return asyncio.run(_run_tool(name, params))
    except WhatsAppError as e:
        rprint(f"[red]{e.kind.value} error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except (httpx.HTTPError, OSError) as e:
        rprint(f"[red]Request failed: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def tools():
    """
    List the tools exposed to agent runtimes.

    Does not require credentials.
    """
    plugin = WhatsAppPlugin()

    table = Table(title=f"Tools for plugin {plugin.name}")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Parameters")

    for tool in plugin.get_tools():
        parameters = ", ".join(
            f"{p.name}{'' if p.required else '?'}: {p.type}" for p in tool.parameters
        )
        table.add_row(tool.name, tool.description, parameters or "-")

    console.print(table)


@app.command()
def debug():
    """
    Initialize the plugin and print its diagnostics.
    """

    async def inspect() -> dict[str, Any]:
        plugin = WhatsAppPlugin()
        await plugin.init()
        try:
            return plugin.debug_plugin_interface()
        finally:
            await plugin.cleanup()

    try:
        info = asyncio.run(inspect())
    except WhatsAppError as e:
        rprint(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    rprint(f"[green]Plugin {info['name']} is ready[/green]")
    rprint(f"  Description: {info['description']}")
    rprint(f"  Client initialized: {info['client_initialized']}")
    rprint(f"  Tools registered: {info['tool_count']}")


@app.command()
def call(
    name: str = typer.Argument(..., help="Tool name (e.g., whatsapp_send_message)"),
    params: Optional[str] = typer.Option(None, "--params", "-p", help="Tool parameters as JSON"),
):
    """
    Execute a single tool and print its JSON result.
    """
    try:
        parsed = json.loads(params) if params else {}
    except json.JSONDecodeError as e:
        rprint(f"[red]Invalid JSON parameters: {e}[/red]")
        raise typer.Exit(1)

    if not isinstance(parsed, dict):
        rprint("[red]Parameters must be a JSON object[/red]")
        raise typer.Exit(1)

    result = _execute(name, parsed)
    console.print_json(json.dumps(result, default=str))


@app.command()
def send_test(
    to: str = typer.Argument(..., help="Recipient phone number (E.164 format)"),
    text: str = typer.Option("Hello from the WhatsApp plugin!", help="Message text"),
):
    """
    Send a test text message.
    """
    result = _execute("whatsapp_send_message", {"to": to, "message": text})

    rprint("[green]Message sent successfully![/green]")
    rprint(f"  Message ID: {result.get('messageId') or '-'}")


if __name__ == "__main__":
    app()
