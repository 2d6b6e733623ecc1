"""Send messages to Facebook Graph API service."""

import time
from typing import Any

import httpx
import logfire

from src.constants import (
    FACEBOOK_API_TIMEOUT_SECONDS,
    FACEBOOK_GRAPH_API_VERSION,
    FACEBOOK_SEND_API_URL,
    LOG_RESPONSE_BODY_CHARS,
)
from src.logging_config import redact_tokens


def build_send_payload(recipient_id: str, text: str) -> dict[str, Any]:
    """Build a Send API body for a plain text reply."""
    return {
        "recipient": {"id": recipient_id},
        "messaging_type": "RESPONSE",
        "message": {"text": text},
    }


async def send_message(
    page_access_token: str,
    recipient_id: str,
    text: str,
    timeout_seconds: float = FACEBOOK_API_TIMEOUT_SECONDS,
) -> dict[str, Any]:
    """
    Send message via Facebook Graph API.

    Args:
        page_access_token: Facebook Page access token
        recipient_id: Facebook user ID to send message to
        text: Message text to send
        timeout_seconds: HTTP timeout for the call

    Returns:
        Parsed JSON body of the Send API response

    Raises:
        httpx.HTTPStatusError: Facebook answered with a non-2xx status
        httpx.RequestError: The request could not be completed
    """
    start_time = time.time()

    logfire.info(
        "Sending Facebook message",
        recipient_id=recipient_id,
        message_length=len(text),
        api_version=FACEBOOK_GRAPH_API_VERSION,
    )

    params = {"access_token": page_access_token}
    payload = build_send_payload(recipient_id, text)
    logfire.debug("Send API request", params=redact_tokens(params))

    try:
        async with httpx.AsyncClient(timeout=timeout_seconds) as client:
            response = await client.post(FACEBOOK_SEND_API_URL, params=params, json=payload)
            elapsed = time.time() - start_time

            if response.is_success:
                response_data = response.json()
                logfire.info(
                    "Facebook message sent successfully",
                    recipient_id=recipient_id,
                    status_code=response.status_code,
                    message_id=response_data.get("message_id"),
                    response_time_ms=elapsed * 1000,
                )
                return response_data

            logfire.error(
                "Facebook message send failed",
                recipient_id=recipient_id,
                status_code=response.status_code,
                response_body=response.text[:LOG_RESPONSE_BODY_CHARS],
                response_time_ms=elapsed * 1000,
            )
            response.raise_for_status()
            return {}
    except httpx.HTTPStatusError as e:
        elapsed = time.time() - start_time
        logfire.error(
            "Facebook API HTTP error",
            recipient_id=recipient_id,
            status_code=e.response.status_code,
            error=str(e),
            error_type=type(e).__name__,
            response_time_ms=elapsed * 1000,
        )
        raise
    except httpx.RequestError as e:
        elapsed = time.time() - start_time
        logfire.error(
            "Facebook API request error",
            recipient_id=recipient_id,
            error=str(e),
            error_type=type(e).__name__,
            response_time_ms=elapsed * 1000,
        )
        raise
