"""
WhatsApp Webhook Receiver

FastAPI router for the subscription handshake and inbound events.

POST flow:
1. Verify signature (only when WHATSAPP_APP_SECRET is configured)
2. Check top-level shape → 404 if not a business account event
3. Extract actionable text messages
4. Render + deliver each one, in order
5. 200 if everything attempted succeeded, 500 otherwise

Responses carry no body. All errors stop here.
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse, Response

from config import Config

from .extract import PayloadValidationError, check_payload_object, extract_messages
from .orchestrator import DependencyError, MessageOrchestrator
from .security import (
    SIGNATURE_HEADER,
    AuthorizationError,
    SignatureVerificationError,
    verify_signature,
    verify_webhook_challenge,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["WhatsApp Webhook"])


# ============================================================================
# DEPENDENCIES
# ============================================================================

def _get_bootstrap(request: Request):
    bootstrap = getattr(request.app.state, "bootstrap", None)
    if bootstrap is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialised",
        )
    return bootstrap


def get_config(request: Request) -> Config:
    """Process-wide configuration built at startup."""
    return _get_bootstrap(request).config


def get_orchestrator(request: Request) -> MessageOrchestrator:
    """Orchestrator wired with the configured image backend and sender."""
    return _get_bootstrap(request).orchestrator


# ============================================================================
# WEBHOOK CHALLENGE (Setup only)
# ============================================================================

@router.get("/webhook")
async def whatsapp_webhook_challenge(
    hub_mode: Optional[str] = Query(None, alias="hub.mode"),
    hub_verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
    hub_challenge: Optional[str] = Query(None, alias="hub.challenge"),
    config: Config = Depends(get_config),
) -> Response:
    """
    Verify webhook subscription challenge from Meta.

    Returns:
        200 with the challenge as plain text, or 403 with no body
    """

    try:
        challenge = verify_webhook_challenge(
            hub_mode, hub_challenge, hub_verify_token, config.verify_token
        )
    except AuthorizationError:
        return Response(status_code=status.HTTP_403_FORBIDDEN)

    return PlainTextResponse(challenge, status_code=status.HTTP_200_OK)


# ============================================================================
# WEBHOOK RECEIVER (Message processing)
# ============================================================================

@router.post("/webhook")
async def whatsapp_webhook_receiver(
    request: Request,
    config: Config = Depends(get_config),
    orchestrator: MessageOrchestrator = Depends(get_orchestrator),
) -> Response:
    """
    Receive WhatsApp events via webhook.

    Returns:
        200: every actionable message was rendered and delivered (or there
             were none)
        401/403: signature missing/invalid (signature checks enabled)
        404: not a whatsapp_business_account payload
        500: rendering, delivery or extraction failed
    """

    body = await request.body()

    # Step 1: Signature (security boundary)
    if config.app_secret:
        try:
            verify_signature(request.headers.get(SIGNATURE_HEADER), body, config.app_secret)
        except SignatureVerificationError as e:
            logger.warning(f"Signature verification failed: {e}")
            code = status.HTTP_401_UNAUTHORIZED if e.missing else status.HTTP_403_FORBIDDEN
            return Response(status_code=code)

    # Step 2: Top-level shape
    try:
        payload = json.loads(body)
        check_payload_object(payload)
    except (json.JSONDecodeError, UnicodeDecodeError, PayloadValidationError) as e:
        logger.warning(f"Rejected webhook payload: {e}")
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    # Steps 3-4: Extract lazily, render and deliver in order
    try:
        delivered = await orchestrator.process(extract_messages(payload))
    except DependencyError as e:
        logger.error(
            f"Error processing webhook: {e}",
            exc_info=e.cause,
            extra={
                "message_index": e.index,
                "destination": e.destination,
                "stage": e.stage,
                "message_id": e.message_id,
            },
        )
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception as e:
        logger.error(f"Unexpected error processing webhook: {e}", exc_info=True)
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"Webhook processed, {delivered} image(s) delivered")
    return Response(status_code=status.HTTP_200_OK)
