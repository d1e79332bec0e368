"""WhatsApp Transport Layer - Module Exports"""

from .extract import PayloadValidationError, check_payload_object, extract_messages
from .orchestrator import IMAGE_FILENAME, DependencyError, MessageOrchestrator
from .schemas import (
    BUSINESS_ACCOUNT_OBJECT,
    ActionableMessage,
    Change,
    ChangeValue,
    Entry,
    InboundMessage,
    Metadata,
    WhatsAppMessageResponse,
    WhatsAppWebhookPayload,
)
from .security import (
    AuthorizationError,
    SignatureVerificationError,
    verify_signature,
    verify_webhook_challenge,
)
from .sender import WhatsAppSender, WhatsAppSenderError
from .webhook import router

__all__ = [
    # Schemas
    "BUSINESS_ACCOUNT_OBJECT",
    "ActionableMessage",
    "WhatsAppWebhookPayload",
    "Entry",
    "Change",
    "ChangeValue",
    "Metadata",
    "InboundMessage",
    "WhatsAppMessageResponse",
    # Extraction
    "extract_messages",
    "check_payload_object",
    "PayloadValidationError",
    # Security
    "verify_signature",
    "verify_webhook_challenge",
    "AuthorizationError",
    "SignatureVerificationError",
    # Sender
    "WhatsAppSender",
    "WhatsAppSenderError",
    # Orchestration
    "MessageOrchestrator",
    "DependencyError",
    "IMAGE_FILENAME",
    # Router
    "router",
]
