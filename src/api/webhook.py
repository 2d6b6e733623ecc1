"""Facebook webhook endpoints.

GET  /webhook  subscription handshake (verify token + challenge echo)
POST /webhook  event delivery, authenticated by X-Hub-Signature-256

Signature checks run on the raw body before any JSON parsing. Once a
delivery is authenticated and parsed the endpoint answers ``200 OK``
regardless of per-event outcomes, so Facebook does not redeliver.
"""

import hmac
import json
import logging

import logfire
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from src.api.dependencies import provide_event_dispatcher
from src.config import Settings, get_settings
from src.constants import SIGNATURE_HEADER
from src.services.event_dispatcher import EventDispatcher
from src.services.signature import SignatureVerificationError, verify_signature

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def verify_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> Response:
    """Facebook webhook verification endpoint."""
    mode = request.query_params.get("hub.mode")
    token = request.query_params.get("hub.verify_token")
    challenge = request.query_params.get("hub.challenge")

    if (
        settings.facebook_verify_token
        and hmac.compare_digest(
            (token or "").encode("utf-8"),
            settings.facebook_verify_token.encode("utf-8"),
        )
        and mode in (None, "subscribe")
    ):
        logger.info("Webhook verified successfully")
        return PlainTextResponse(challenge or "")

    logger.warning("Webhook verification failed")
    return PlainTextResponse("Invalid verification token", status_code=403)


@router.post("")
async def handle_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
    dispatcher: EventDispatcher = Depends(provide_event_dispatcher),
) -> Response:
    """Receive Messenger events and relay replies."""
    raw_body = await request.body()

    try:
        verify_signature(
            raw_body,
            request.headers.get(SIGNATURE_HEADER),
            settings.facebook_app_secret,
        )
    except SignatureVerificationError as e:
        logger.warning("Invalid request signature: %s", e)
        return PlainTextResponse("Unauthorized", status_code=403)

    try:
        payload = json.loads(raw_body)
    except ValueError:
        logger.warning("Webhook body is not valid JSON")
        return JSONResponse({"error": "Invalid JSON payload"}, status_code=400)

    logfire.info(
        "Received webhook",
        object=payload.get("object") if isinstance(payload, dict) else None,
        body_length=len(raw_body),
    )

    report = await dispatcher.dispatch(payload)
    request.state.dispatch_report = report

    return PlainTextResponse("OK")
