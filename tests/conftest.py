"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import Config  # noqa: E402


def text_message(body, sender="555", message_id="wamid.1"):
    """Inbound WhatsApp text message."""
    return {
        "from": sender,
        "id": message_id,
        "timestamp": "1707500000",
        "type": "text",
        "text": {"body": body},
    }


def webhook_payload(*messages, phone_number_id="123", field="messages"):
    """Single-entry, single-change business account payload."""
    return {
        "object": "whatsapp_business_account",
        "entry": [{
            "id": "WABA_ID",
            "changes": [{
                "field": field,
                "value": {
                    "messaging_product": "whatsapp",
                    "metadata": {
                        "display_phone_number": "15550001111",
                        "phone_number_id": phone_number_id,
                    },
                    "messages": list(messages),
                },
            }],
        }],
    }


@pytest.fixture
def config():
    """Fully populated configuration, signature checks disabled."""
    return Config(
        access_token="test_access_token",
        business_account_id="WABA_ID",
        phone_number="+15550001111",
        business_phone_id="BUSINESS_PHONE_ID",
        verify_token="test_token",
    )
