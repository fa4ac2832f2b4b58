"""WhatsApp plugin command-line interface."""

from whatsapp_plugin.cli.main import app

__all__ = ["app"]
