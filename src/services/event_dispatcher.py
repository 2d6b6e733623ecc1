"""Webhook event dispatch.

Walks a verified page webhook payload (``entry[].messaging[]``) and routes
each messaging event by its shape:

- text message  -> Gemini reply -> Send API
- postback      -> canned reply -> Send API
- quick reply   -> logged only
- echo / other  -> skipped

Events are handled one at a time, in payload order. A failure while
handling one event is logged and recorded in its ``EventOutcome``; the
remaining events are still processed.
"""

import logging
from typing import Any, Protocol

import logfire

from src.constants import PAGE_OBJECT
from src.models.agent_models import GenerationResult
from src.models.message_models import DispatchReport, EventOutcome
from src.models.messenger import EventKind, MessagingEvent, OutboundReply
from src.services.messaging_protocol import MessagingService
from src.services.postback import resolve_postback

logger = logging.getLogger(__name__)


class ReplyService(Protocol):
    """Anything that turns user text into a reply."""

    async def generate(self, user_message: str) -> GenerationResult: ...


def _raw_sender_id(raw_event: Any) -> str | None:
    """Best-effort sender ID from an event that may not validate."""
    if not isinstance(raw_event, dict):
        return None
    sender = raw_event.get("sender")
    if isinstance(sender, dict) and sender.get("id") is not None:
        return str(sender["id"])
    return None


class EventDispatcher:
    """Dispatch messaging events to their handling paths.

    Example:
        >>> dispatcher = EventDispatcher(
        ...     reply_service=GeminiReplyService.from_settings(settings),
        ...     messaging_service=FacebookMessagingService(token),
        ... )
        >>> report = await dispatcher.dispatch(payload)
        >>> report.event_count
        1
    """

    def __init__(
        self,
        reply_service: ReplyService,
        messaging_service: MessagingService,
    ):
        self._reply_service = reply_service
        self._messaging_service = messaging_service

    async def dispatch(self, payload: Any) -> DispatchReport:
        """
        Process every messaging event in a webhook payload.

        Args:
            payload: Parsed JSON body of a verified webhook request

        Returns:
            DispatchReport with one EventOutcome per messaging event. Payloads
            that are not page webhooks are reported as ignored.
        """
        object_type = payload.get("object") if isinstance(payload, dict) else None
        if not isinstance(object_type, str):
            object_type = None
        if object_type != PAGE_OBJECT:
            logger.info("Ignoring webhook for object type: %s", object_type)
            return DispatchReport(object=object_type, ignored=True)

        report = DispatchReport(object=object_type)

        entries = payload.get("entry")
        if not isinstance(entries, list):
            logger.warning("Page webhook without an entry list")
            return report

        for entry in entries:
            events = entry.get("messaging") if isinstance(entry, dict) else None
            if not isinstance(events, list):
                logger.warning("Skipping webhook entry without messaging events")
                continue

            for raw_event in events:
                report.outcomes.append(await self.handle_event(raw_event))

        logfire.info(
            "Webhook dispatched",
            event_count=report.event_count,
            failure_count=report.failure_count,
        )
        return report

    async def handle_event(self, raw_event: Any) -> EventOutcome:
        """Handle one raw messaging event; never raises."""
        outcome = EventOutcome(sender_id=_raw_sender_id(raw_event))

        try:
            event = MessagingEvent.model_validate(raw_event)
            outcome.kind = event.kind

            if outcome.kind is EventKind.TEXT:
                text = event.message.text
                logger.info("Message from %s: %s", event.sender_id, text)
                outcome.generation = await self._reply_service.generate(text)
                outcome.reply_text = outcome.generation.text

            elif outcome.kind is EventKind.POSTBACK:
                payload = event.postback.payload
                logger.info("Postback from %s: %s", event.sender_id, payload)
                outcome.reply_text = resolve_postback(payload)

            elif outcome.kind is EventKind.QUICK_REPLY:
                logfire.info(
                    "Quick reply received",
                    sender_id=event.sender_id,
                    payload=event.message.quick_reply.payload,
                )
                return outcome

            elif outcome.kind is EventKind.ECHO:
                logger.debug("Ignoring echo of page message %s", event.message.mid)
                return outcome

            else:
                logger.info("Unsupported messaging event from %s", event.sender_id)
                return outcome

            outcome.delivery = await self._messaging_service.send_message(
                OutboundReply(recipient_id=event.sender_id, text=outcome.reply_text)
            )
        except Exception as e:
            logger.error("Error processing message: %s", e, exc_info=True)
            outcome.error = f"{type(e).__name__}: {e}"

        return outcome


def get_event_dispatcher(
    reply_service: ReplyService,
    messaging_service: MessagingService,
) -> EventDispatcher:
    """Factory function to create an EventDispatcher instance."""
    return EventDispatcher(
        reply_service=reply_service,
        messaging_service=messaging_service,
    )
