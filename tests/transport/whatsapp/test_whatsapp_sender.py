"""
WhatsApp Image Sender Tests

Cloud API calls are served by httpx.MockTransport; nothing leaves the process.
"""

import json

import httpx
import pytest

from transport.whatsapp.schemas import WhatsAppMessageResponse
from transport.whatsapp.sender import WhatsAppSender, WhatsAppSenderError


API_URL = "https://graph.facebook.com/v18.0/BUSINESS_PHONE_ID"


def _sender(handler) -> WhatsAppSender:
    return WhatsAppSender(
        access_token="test_access_token",
        phone_number_id="BUSINESS_PHONE_ID",
        transport=httpx.MockTransport(handler),
    )


def _cloud_api(requests_seen):
    """Well-behaved Cloud API: upload returns a media id, send returns a wamid."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        if request.url.path.endswith("/media"):
            return httpx.Response(200, json={"id": "MEDIA_ID"})
        if request.url.path.endswith("/messages"):
            return httpx.Response(
                200,
                json={
                    "messaging_product": "whatsapp",
                    "contacts": [{"input": "123", "wa_id": "123"}],
                    "messages": [{"id": "wamid.sent"}],
                },
            )
        return httpx.Response(404)

    return handler


class TestSendImage:
    """Test upload-then-send."""

    @pytest.mark.asyncio
    async def test_uploads_then_sends(self):
        """Media is uploaded, then referenced by id in the message."""
        seen = []
        sender = _sender(_cloud_api(seen))

        result = await sender.send_image("123", b"\x89PNGdata", "message_highlight.png")

        assert isinstance(result, WhatsAppMessageResponse)
        assert result.message_id == "wamid.sent"

        upload, send = seen
        assert str(upload.url) == f"{API_URL}/media"
        assert upload.headers["Authorization"] == "Bearer test_access_token"
        upload_body = upload.content
        assert b'filename="message_highlight.png"' in upload_body
        assert b"\x89PNGdata" in upload_body
        assert b"image/png" in upload_body

        assert str(send.url) == f"{API_URL}/messages"
        assert send.headers["Authorization"] == "Bearer test_access_token"
        assert json.loads(send.content) == {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": "123",
            "type": "image",
            "image": {"id": "MEDIA_ID"},
        }

    @pytest.mark.asyncio
    async def test_custom_api_version_and_host(self):
        """Version and base URL shape the endpoint."""
        seen = []
        sender = WhatsAppSender(
            access_token="t",
            phone_number_id="PID",
            api_version="v22.0",
            base_url="https://graph.example.test/",
            transport=httpx.MockTransport(_cloud_api(seen)),
        )

        await sender.send_image("123", b"img", "f.png")

        assert str(seen[0].url) == "https://graph.example.test/v22.0/PID/media"


class TestSendErrors:
    """All failures surface as WhatsAppSenderError."""

    @pytest.mark.asyncio
    async def test_upload_rejected(self):
        """Non-2xx on upload fails without sending."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(401, json={"error": {"message": "Invalid OAuth access token"}})

        with pytest.raises(WhatsAppSenderError, match="401"):
            await _sender(handler).send_image("123", b"img", "f.png")

        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_send_rejected(self):
        """Non-2xx on send fails."""

        def handler(request):
            if request.url.path.endswith("/media"):
                return httpx.Response(200, json={"id": "MEDIA_ID"})
            return httpx.Response(429, json={"error": {"message": "Rate limit hit"}})

        with pytest.raises(WhatsAppSenderError, match="429"):
            await _sender(handler).send_image("123", b"img", "f.png")

    @pytest.mark.asyncio
    async def test_upload_without_media_id(self):
        """Malformed upload response fails."""

        def handler(request):
            return httpx.Response(200, json={"unexpected": True})

        with pytest.raises(WhatsAppSenderError, match="Malformed"):
            await _sender(handler).send_image("123", b"img", "f.png")

    @pytest.mark.asyncio
    async def test_non_json_response(self):
        """Non-JSON body fails."""

        def handler(request):
            return httpx.Response(200, text="<html>gateway</html>")

        with pytest.raises(WhatsAppSenderError, match="Non-JSON"):
            await _sender(handler).send_image("123", b"img", "f.png")

    @pytest.mark.asyncio
    async def test_network_error(self):
        """Transport errors are wrapped."""

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(WhatsAppSenderError, match="HTTP request failed"):
            await _sender(handler).send_image("123", b"img", "f.png")


class TestSenderConfiguration:
    """Missing credentials fail at construction."""

    def test_missing_access_token(self):
        with pytest.raises(WhatsAppSenderError):
            WhatsAppSender(access_token="", phone_number_id="PID")

    def test_missing_phone_number_id(self):
        with pytest.raises(WhatsAppSenderError):
            WhatsAppSender(access_token="t", phone_number_id="")
