"""
WhatsApp Cloud API Client

Async client for the WhatsApp Business Cloud API (Graph API).
One method per capability; every failure surfaces to the caller.
"""

import logging
import mimetypes
import os
import time
from typing import Any, Mapping

import httpx

from whatsapp_plugin.cache import TTLCache
from whatsapp_plugin.config import WhatsAppConfig, load_config
from whatsapp_plugin.errors import WhatsAppResponseError, api_error_from_response
from whatsapp_plugin.payloads import (
    build_interactive_payload,
    build_location_payload,
    build_media_payload,
    build_profile_update_payload,
    build_read_receipt_payload,
    build_template_payload,
    build_text_payload,
    format_phone_number,
    media_type_name,
)
from whatsapp_plugin.types import (
    Contact,
    InteractiveMessageOptions,
    LocationMessageOptions,
    MediaMessageOptions,
    TemplateMessageOptions,
    WhatsAppMessage,
)

logger = logging.getLogger(__name__)


class WhatsAppClient:
    """
    WhatsApp Cloud API client.

    Resolves configuration on construction and refuses to start without
    an access token and a phone number ID.
    """

    def __init__(
        self,
        config: WhatsAppConfig | Mapping[str, Any] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = load_config(config)
        self.config.validate()

        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self.message_cache = TTLCache(
            ttl_seconds=self.config.cache_message_seconds,
            max_entries=self.config.cache_max_entries,
        )
        self.contact_cache = TTLCache(
            ttl_seconds=self.config.cache_contact_seconds,
            max_entries=self.config.cache_max_entries,
        )

    @property
    def phone_number_id(self) -> str:
        return self.config.phone_number_id or ""

    def is_configured(self) -> bool:
        """True if the API token and phone number ID are set."""
        return self.config.is_complete()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.api_base_url,
                timeout=self.config.timeout_seconds,
                headers={"Authorization": f"Bearer {self.config.api_token}"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "WhatsAppClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        action: str,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """
        Make an authenticated API request.

        HTTP error statuses become WhatsAppApiError; transport errors
        propagate unchanged.
        """
        client = self._get_client()

        try:
            response = await client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error = api_error_from_response(action, e.response)
            logger.error(
                f"{action} - Status code: {e.response.status_code}",
                extra={"path": path, "error_code": error.error_code},
            )
            raise error from e
        except httpx.RequestError as e:
            logger.error(f"{action} - Request failed: {e}", extra={"path": path})
            raise

        if not response.content:
            return {}
        return response.json()

    async def _post_message(self, payload: dict[str, Any], action: str) -> str:
        """Post to the messages endpoint and return the first message ID."""
        response = await self._request(
            "POST",
            f"/{self.phone_number_id}/messages",
            action,
            json=payload,
        )

        messages = response.get("messages") or []
        message_id = messages[0].get("id", "") if messages else ""

        logger.info(
            f"Sent {payload.get('type')} message via Cloud API",
            extra={"to": payload.get("to"), "message_id": message_id},
        )

        if message_id:
            self._remember_message(message_id, payload)

        return message_id

    def _remember_message(self, message_id: str, payload: dict[str, Any]) -> None:
        message_type = payload.get("type", "")
        content = payload.get(message_type)
        body = ""
        media = None

        if message_type == "text":
            body = content["body"]
        elif message_type == "template":
            body = content["name"]
        elif message_type == "interactive":
            text_body = content.get("body")
            body = text_body.get("text", "") if isinstance(text_body, dict) else ""
        elif isinstance(content, dict) and ("id" in content or "link" in content):
            body = content.get("caption", "")
            media = dict(content)

        self.message_cache.set(
            message_id,
            WhatsAppMessage(
                id=message_id,
                body=body,
                timestamp=time.time(),
                type=message_type,
                from_=self.phone_number_id,
                to=payload.get("to"),
                media=media,
            ),
        )

    async def send_message(self, to: str, body: str) -> str:
        """
        Send a text message.

        Args:
            to: Recipient phone number with country code
            body: Text to send

        Returns:
            Message ID, or "" if the API returned none
        """
        payload = build_text_payload(to, body)
        return await self._post_message(payload, "Error sending message")

    async def send_template_message(self, options: TemplateMessageOptions) -> str:
        """Send an approved template message."""
        payload = build_template_payload(options)
        return await self._post_message(payload, "Error sending template message")

    async def send_media(self, options: MediaMessageOptions) -> str:
        """
        Send a media message.

        A local file_path is uploaded first and referenced by media ID;
        otherwise the url is sent as a link.
        """
        # Both checks fail before any upload is made
        media_type_name(options.type)
        if not options.file_path and not options.url:
            build_media_payload(options)

        media_id = None
        if options.file_path:
            media_id = await self.upload_media(options.file_path)

        payload = build_media_payload(options, media_id=media_id)
        return await self._post_message(payload, "Error sending media message")

    async def send_interactive_message(self, options: InteractiveMessageOptions) -> str:
        """Send an interactive message (buttons, lists, products)."""
        payload = build_interactive_payload(options)
        return await self._post_message(payload, "Error sending interactive message")

    async def send_location(self, options: LocationMessageOptions) -> str:
        """Send a location message."""
        payload = build_location_payload(options)
        return await self._post_message(payload, "Error sending location message")

    async def mark_message_as_read(self, message_id: str) -> bool:
        """Mark a received message as read."""
        await self._request(
            "POST",
            f"/{self.phone_number_id}/messages",
            "Error marking message as read",
            json=build_read_receipt_payload(message_id),
        )
        return True

    async def get_business_profile(self) -> dict[str, Any]:
        """Get the business profile, or {} if the API returned none."""
        response = await self._request(
            "GET",
            f"/{self.phone_number_id}/whatsapp_business_profile",
            "Error getting business profile",
        )
        profiles = response.get("data") or []
        return profiles[0] if profiles else {}

    async def update_business_profile(self, profile_data: dict[str, Any]) -> bool:
        """Update business profile fields."""
        await self._request(
            "PATCH",
            f"/{self.phone_number_id}/whatsapp_business_profile",
            "Error updating business profile",
            json=build_profile_update_payload(profile_data),
        )
        return True

    async def upload_media(self, file_path: str) -> str:
        """
        Upload a local file to WhatsApp servers.

        Returns:
            Media ID to reference in a send call

        Raises:
            FileNotFoundError: If file_path does not exist
            WhatsAppResponseError: If the response carries no media ID
        """
        if not os.path.isfile(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")

        mime_type, _ = mimetypes.guess_type(file_path)

        with open(file_path, "rb") as f:
            files = {
                "file": (
                    os.path.basename(file_path),
                    f,
                    mime_type or "application/octet-stream",
                )
            }
            response = await self._request(
                "POST",
                f"/{self.phone_number_id}/media",
                "Error uploading media",
                data={"messaging_product": "whatsapp"},
                files=files,
            )

        media_id = response.get("id")
        if not media_id:
            raise WhatsAppResponseError(
                "Failed to upload media: No media ID received",
                details=response,
            )

        logger.info("Uploaded media", extra={"media_id": media_id})
        return media_id

    async def get_media_url(self, media_id: str) -> str:
        """Get the download URL for an uploaded or received media ID."""
        response = await self._request("GET", f"/{media_id}", "Error getting media URL")

        url = response.get("url")
        if not url:
            raise WhatsAppResponseError("Failed to get media URL", details=response)
        return url

    async def get_contact_info(self, phone_number: str) -> Contact:
        """
        Get contact information.

        The Cloud API has no contact lookup endpoint, so this returns a
        placeholder holding the formatted number, cached for the contact TTL.
        """
        formatted_number = format_phone_number(phone_number)
        cache_key = f"contact_{formatted_number}"

        cached = self.contact_cache.get(cache_key)
        if cached is not None:
            logger.debug("Contact cache hit", extra={"key": cache_key})
            return cached

        contact = Contact(id=formatted_number)
        self.contact_cache.set(cache_key, contact)
        return contact

    def get_cached_message(self, message_id: str) -> WhatsAppMessage | None:
        """Return a recently sent message, if still cached."""
        return self.message_cache.get(message_id)
