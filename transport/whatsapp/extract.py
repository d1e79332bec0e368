"""
WhatsApp Event Extraction

PURE CONVERSION - NO I/O, NO MODEL CALLS

Walks the nested webhook payload (entry → changes → messages) and yields
one ActionableMessage per text message, in payload order.
- Non-"messages" changes: ignored
- Non-text messages: skipped with a warning
- Missing collections: read as empty
"""

import logging
from typing import Any, Iterator

from .schemas import (
    BUSINESS_ACCOUNT_OBJECT,
    MESSAGES_FIELD,
    TEXT_MESSAGE_TYPE,
    ActionableMessage,
    ChangeValue,
    Metadata,
    WhatsAppWebhookPayload,
)

logger = logging.getLogger(__name__)


class PayloadValidationError(Exception):
    """Payload is not a WhatsApp business account event."""
    pass


def check_payload_object(body: Any) -> None:
    """
    Verify the top-level payload shape before any processing.

    Raises:
        PayloadValidationError: Body is not an object, or `object` is not
            'whatsapp_business_account'
    """
    if not isinstance(body, dict):
        raise PayloadValidationError(
            f"Expected a JSON object, got {type(body).__name__}"
        )

    if body.get("object") != BUSINESS_ACCOUNT_OBJECT:
        raise PayloadValidationError(
            f"Unexpected object type: {body.get('object')!r}"
        )


def extract_messages(
    payload: dict | WhatsAppWebhookPayload,
) -> Iterator[ActionableMessage]:
    """
    Yield actionable text messages from a webhook payload.

    Lazy and side-effect free apart from log lines: iterating twice over the
    same payload yields equal sequences.

    Args:
        payload: Raw dict or parsed WhatsAppWebhookPayload

    Yields:
        ActionableMessage per text message, entry → change → message order
    """

    if not isinstance(payload, WhatsAppWebhookPayload):
        payload = WhatsAppWebhookPayload.model_validate(payload)

    for entry in payload.entry or []:
        for change in entry.changes or []:
            if change.field != MESSAGES_FIELD:
                logger.debug(f"Ignoring change field: {change.field}")
                continue

            value = (
                ChangeValue.model_validate(change.value)
                if change.value is not None
                else ChangeValue()
            )
            metadata = value.metadata or Metadata()

            for message in value.messages or []:
                if message.type != TEXT_MESSAGE_TYPE:
                    logger.warning(
                        f"Skipping non-text message: {message.type}",
                        extra={"message_id": message.id},
                    )
                    continue

                body = message.text.body if message.text else None
                if not body:
                    logger.warning(
                        "Skipping text message without body",
                        extra={"message_id": message.id},
                    )
                    continue

                if not metadata.phone_number_id:
                    logger.warning(
                        "Skipping text message without metadata.phone_number_id",
                        extra={"message_id": message.id},
                    )
                    continue

                yield ActionableMessage(
                    destination=metadata.phone_number_id,
                    sender=message.from_,
                    text=body,
                    message_id=message.id,
                )
