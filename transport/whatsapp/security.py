"""
WhatsApp Webhook Security

SECURITY BOUNDARY - subscription handshake and Meta HMAC signature.
No retries. No logic.
"""

import hashlib
import hmac
import logging
from typing import Optional

logger = logging.getLogger(__name__)


SUBSCRIBE_MODE = "subscribe"
SIGNATURE_HEADER = "X-Hub-Signature-256"


class AuthorizationError(Exception):
    """Webhook verification token or mode mismatch."""
    pass


class SignatureVerificationError(Exception):
    """Signature verification failed."""

    def __init__(self, message: str, missing: bool = False):
        super().__init__(message)
        self.missing = missing


def verify_webhook_challenge(
    hub_mode: Optional[str],
    hub_challenge: Optional[str],
    hub_verify_token: Optional[str],
    expected_token: str,
) -> str:
    """
    Verify webhook subscription challenge from WhatsApp.

    WhatsApp calls GET /webhook with:
    - hub.mode=subscribe
    - hub.challenge=random_string
    - hub.verify_token=configured_token

    We verify the token and echo back the challenge.

    Args:
        hub_mode: Should be "subscribe"
        hub_challenge: Random string to echo back
        hub_verify_token: Token to verify
        expected_token: Configured verification secret

    Returns:
        The challenge string to echo back ("" when absent)

    Raises:
        AuthorizationError: Wrong mode or token
    """

    token_ok = hub_verify_token is not None and hmac.compare_digest(
        hub_verify_token.encode("utf-8"), expected_token.encode("utf-8")
    )

    if hub_mode != SUBSCRIBE_MODE or not token_ok:
        logger.warning(
            "Webhook verification failed",
            extra={"hub_mode": hub_mode, "token_present": hub_verify_token is not None},
        )
        raise AuthorizationError("Invalid hub.mode or hub.verify_token")

    logger.info("Webhook verified successfully")
    return hub_challenge or ""


def verify_signature(
    signature: Optional[str],
    body: bytes,
    app_secret: str,
) -> None:
    """
    Verify Meta HMAC-SHA256 signature on a webhook body.

    WhatsApp sends:
    - X-Hub-Signature-256 header with HMAC
    - Request body

    We compute HMAC(body, app_secret) and compare.

    Args:
        signature: Value of the X-Hub-Signature-256 header
        body: Raw request body bytes
        app_secret: Meta app secret

    Raises:
        SignatureVerificationError: Missing (missing=True) or invalid signature
    """

    if not signature:
        raise SignatureVerificationError(
            f"Missing {SIGNATURE_HEADER} header", missing=True
        )

    expected_signature = "sha256=" + hmac.new(
        key=app_secret.encode("utf-8"),
        msg=body,
        digestmod=hashlib.sha256,
    ).hexdigest()

    # Compare (constant-time to prevent timing attacks)
    if not hmac.compare_digest(signature.encode("utf-8"), expected_signature.encode("utf-8")):
        raise SignatureVerificationError("Invalid signature")
