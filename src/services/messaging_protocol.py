"""Messaging abstraction protocols for decoupling from the Facebook API.

The dispatcher talks to a ``MessagingService`` and receives a
``DeliveryResult`` for every send, so delivery failures are observable
without inspecting logs and tests can swap in a fake without httpx mocking.
"""

from typing import Protocol

import httpx
import logfire

from src.config import Settings
from src.models.message_models import DeliveryResult
from src.models.messenger import OutboundReply
from src.services.facebook_service import send_message


class MessagingService(Protocol):
    """Protocol for delivering replies to a messaging platform."""

    async def send_message(self, reply: OutboundReply) -> DeliveryResult:
        """Send a reply.

        Implementations never raise; failures are reported in the result.
        """
        ...


class FacebookMessagingService:
    """Facebook Messenger implementation of MessagingService.

    Single attempt per reply, no retry.

    Example:
        >>> service = FacebookMessagingService(page_access_token="...")
        >>> result = await service.send_message(
        ...     OutboundReply(recipient_id="user123", text="Hello!")
        ... )
        >>> result.ok
        True
    """

    def __init__(
        self,
        page_access_token: str | None,
        timeout_seconds: float | None = None,
    ):
        """
        Args:
            page_access_token: Facebook Page access token (None if unset)
            timeout_seconds: HTTP timeout for Send API calls
        """
        self._token = page_access_token
        self._timeout_kwargs = (
            {"timeout_seconds": timeout_seconds} if timeout_seconds is not None else {}
        )

    async def send_message(self, reply: OutboundReply) -> DeliveryResult:
        """Send a reply via the Send API and report the outcome."""
        if not self._token:
            logfire.error(
                "Cannot send Facebook message: page access token not configured",
                recipient_id=reply.recipient_id,
            )
            return DeliveryResult(
                recipient_id=reply.recipient_id,
                ok=False,
                error="FACEBOOK_PAGE_ACCESS_TOKEN is not configured",
            )

        try:
            response_data = await send_message(
                page_access_token=self._token,
                recipient_id=reply.recipient_id,
                text=reply.text,
                **self._timeout_kwargs,
            )
        except httpx.HTTPStatusError as e:
            return DeliveryResult(
                recipient_id=reply.recipient_id,
                ok=False,
                status_code=e.response.status_code,
                error=str(e),
            )
        except Exception as e:
            logfire.error(
                "FacebookMessagingService.send_message failed",
                recipient_id=reply.recipient_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return DeliveryResult(
                recipient_id=reply.recipient_id,
                ok=False,
                error=f"{type(e).__name__}: {e}",
            )

        return DeliveryResult(
            recipient_id=reply.recipient_id,
            ok=True,
            status_code=200,
            message_id=response_data.get("message_id"),
        )


def get_messaging_service(settings: Settings) -> FacebookMessagingService:
    """Factory function to get a MessagingService implementation."""
    return FacebookMessagingService(
        page_access_token=settings.facebook_page_access_token,
        timeout_seconds=settings.facebook_api_timeout_seconds,
    )
