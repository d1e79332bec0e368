"""
WhatsApp Transport Layer - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Only defines the contract between WhatsApp and the message pipeline.

Every collection on the inbound side is optional: WhatsApp omits empty
arrays, and a missing field must read as "nothing to do", never as an error.
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


BUSINESS_ACCOUNT_OBJECT = "whatsapp_business_account"
MESSAGES_FIELD = "messages"
TEXT_MESSAGE_TYPE = "text"


# ============================================================================
# WHATSAPP WEBHOOK PAYLOAD SCHEMAS (INPUT)
# ref: https://developers.facebook.com/docs/whatsapp/cloud-api/webhooks/payload-examples
# ============================================================================

class TextBody(BaseModel):
    """Text content of a message."""
    body: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class InboundMessage(BaseModel):
    """A single WhatsApp message."""
    from_: Optional[str] = Field(None, alias="from")
    id: Optional[str] = None
    timestamp: Optional[str] = None
    type: Optional[str] = None

    text: Optional[TextBody] = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")  # audio, image, context, ...


class Metadata(BaseModel):
    """Business-side endpoint the message arrived on."""
    phone_number_id: Optional[str] = None
    display_phone_number: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class ChangeValue(BaseModel):
    """Payload of a single change."""
    messaging_product: Optional[str] = None
    metadata: Optional[Metadata] = None
    messages: Optional[List[InboundMessage]] = None

    model_config = ConfigDict(extra="allow")  # contacts, statuses, errors


class Change(BaseModel):
    """One state change inside an entry."""
    field: Optional[str] = None
    # Raw; validated as ChangeValue only for "messages" changes
    value: Optional[Any] = None

    model_config = ConfigDict(extra="allow")


class Entry(BaseModel):
    """Account-level event bundle."""
    id: Optional[str] = None
    changes: Optional[List[Change]] = None

    model_config = ConfigDict(extra="allow")


class WhatsAppWebhookPayload(BaseModel):
    """
    Full WhatsApp webhook payload.

    `object` is always 'whatsapp_business_account' for payloads we act on.
    """

    object: Optional[str] = Field(None, description="Account type discriminator")
    entry: Optional[List[Entry]] = Field(None, description="Webhook entries")

    model_config = ConfigDict(extra="allow")  # WhatsApp may add fields


# ============================================================================
# ACTIONABLE MESSAGE (THE CONTRACT)
# ============================================================================

@dataclass(frozen=True)
class ActionableMessage:
    """
    A text message ready for rendering and delivery.

    destination: phone_number_id of the change the message arrived on
    sender:      the message's `from`
    text:        the message's text.body
    """

    destination: str
    sender: Optional[str]
    text: str

    # Log context only
    message_id: Optional[str] = None


# ============================================================================
# WHATSAPP API RESPONSES (OUTPUT)
# ============================================================================

class MediaUploadResponse(BaseModel):
    """Response from WhatsApp Cloud API when uploading media."""
    id: str


class WhatsAppMessageResponse(BaseModel):
    """Response from WhatsApp Cloud API when sending a message."""

    messaging_product: str = Field(default="whatsapp")
    contacts: List[dict] = Field(default_factory=list)  # [{"input": "1234567890", "wa_id": "1234567890"}]
    messages: List[dict] = Field(default_factory=list)  # [{"id": "wamid.xxx"}]

    @property
    def message_id(self) -> Optional[str]:
        return self.messages[0].get("id") if self.messages else None
