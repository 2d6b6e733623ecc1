"""FastAPI dependency providers.

Handlers receive their collaborators through ``Depends`` so tests can swap
any of them with ``app.dependency_overrides``.
"""

from fastapi import Depends

from src.config import Settings, get_settings
from src.services.agent_service import GeminiReplyService, get_reply_service
from src.services.event_dispatcher import EventDispatcher, get_event_dispatcher
from src.services.messaging_protocol import (
    FacebookMessagingService,
    get_messaging_service,
)


def provide_reply_service(
    settings: Settings = Depends(get_settings),
) -> GeminiReplyService:
    return get_reply_service(settings)


def provide_messaging_service(
    settings: Settings = Depends(get_settings),
) -> FacebookMessagingService:
    return get_messaging_service(settings)


def provide_event_dispatcher(
    reply_service: GeminiReplyService = Depends(provide_reply_service),
    messaging_service: FacebookMessagingService = Depends(provide_messaging_service),
) -> EventDispatcher:
    return get_event_dispatcher(
        reply_service=reply_service,
        messaging_service=messaging_service,
    )
