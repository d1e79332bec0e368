"""
WhatsApp Image Sender

Delivers rendered images through the WhatsApp Cloud API.
No formatting intelligence. No retries. No logic.

Two calls per image:
1. POST /{phone_number_id}/media     (multipart upload → media id)
2. POST /{phone_number_id}/messages  (image message referencing the media id)
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from .schemas import MediaUploadResponse, WhatsAppMessageResponse

logger = logging.getLogger(__name__)


IMAGE_MIME_TYPE = "image/png"


class WhatsAppSenderError(Exception):
    """Failed to deliver an image to WhatsApp."""
    pass


class WhatsAppSender:
    """
    WhatsApp Cloud API client for image delivery.

    A fresh httpx.AsyncClient is opened per delivery; nothing is shared
    between webhook requests.
    """

    def __init__(
        self,
        access_token: str,
        phone_number_id: str,
        api_version: str = "v18.0",
        base_url: str = "https://graph.facebook.com",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            access_token:    Cloud API bearer token
            phone_number_id: Business phone number id that sends the image
            api_version:     Graph API version, e.g. "v18.0"
            base_url:        Graph API host
            timeout:         Per-call HTTP timeout in seconds
            transport:       Optional httpx transport (tests use MockTransport)
        """
        if not access_token:
            raise WhatsAppSenderError("WHATSAPP_ACCESS_TOKEN not configured")
        if not phone_number_id:
            raise WhatsAppSenderError("WHATSAPP_BUSINESS_PHONE_ID not configured")

        self.access_token = access_token
        self.phone_number_id = phone_number_id
        self.timeout = timeout
        self.api_url = f"{base_url.rstrip('/')}/{api_version}/{phone_number_id}"
        self._transport = transport

    @property
    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.access_token}"}

    async def send_image(
        self,
        destination: str,
        image: bytes,
        filename: str,
    ) -> WhatsAppMessageResponse:
        """
        Upload an image and send it to a destination.

        Args:
            destination: Recipient identifier
            image: Encoded PNG bytes
            filename: File name shown for the upload

        Returns:
            WhatsAppMessageResponse from Meta API

        Raises:
            WhatsAppSenderError: If upload or send fails
        """

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self.timeout,
            ) as client:
                media_id = await self._upload(client, image, filename)
                result = await self._send(client, destination, media_id)

        except httpx.RequestError as e:
            logger.error(
                f"HTTP request failed: {e}",
                exc_info=True,
                extra={"destination": destination, "error": str(e)},
            )
            raise WhatsAppSenderError(f"HTTP request failed: {e}") from e

        logger.info(
            f"Image sent to {destination}",
            extra={
                "destination": destination,
                "media_id": media_id,
                "response_id": result.message_id,
            },
        )
        return result

    async def _upload(
        self,
        client: httpx.AsyncClient,
        image: bytes,
        filename: str,
    ) -> str:
        response = await client.post(
            f"{self.api_url}/media",
            headers=self._headers,
            data={"messaging_product": "whatsapp", "type": IMAGE_MIME_TYPE},
            files={"file": (filename, image, IMAGE_MIME_TYPE)},
        )
        payload = self._check(response, "media upload")

        try:
            return MediaUploadResponse.model_validate(payload).id
        except ValidationError as e:
            raise WhatsAppSenderError(f"Malformed media upload response: {payload}") from e

    async def _send(
        self,
        client: httpx.AsyncClient,
        destination: str,
        media_id: str,
    ) -> WhatsAppMessageResponse:
        message = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": destination,
            "type": "image",
            "image": {"id": media_id},
        }
        response = await client.post(
            f"{self.api_url}/messages",
            headers=self._headers,
            json=message,
        )
        payload = self._check(response, "message send")

        try:
            return WhatsAppMessageResponse.model_validate(payload)
        except ValidationError as e:
            raise WhatsAppSenderError(f"Malformed message response: {payload}") from e

    @staticmethod
    def _check(response: httpx.Response, step: str) -> dict:
        """Return the JSON body of a successful response, raise otherwise."""
        if not response.is_success:
            error_text = response.text
            logger.error(
                f"WhatsApp API error during {step}: {response.status_code} - {error_text}",
                extra={
                    "status_code": response.status_code,
                    "error_body": error_text,
                },
            )
            raise WhatsAppSenderError(
                f"WhatsApp API returned {response.status_code} during {step}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise WhatsAppSenderError(f"Non-JSON response during {step}") from e
