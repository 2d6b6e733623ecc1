"""Delivery and dispatch outcome models."""

from pydantic import BaseModel, Field

from src.models.agent_models import GenerationResult
from src.models.messenger import EventKind


class DeliveryResult(BaseModel):
    """Outcome of a single Send API call."""

    recipient_id: str = Field(..., description="Facebook user ID (PSID)")
    ok: bool = Field(..., description="Whether Facebook accepted the message")
    message_id: str | None = Field(
        default=None, description="Message ID returned by the Send API"
    )
    status_code: int | None = Field(
        default=None, description="HTTP status code, if a response was received"
    )
    error: str | None = Field(default=None, description="Failure description")


class EventOutcome(BaseModel):
    """What happened to one messaging event."""

    sender_id: str | None = None
    kind: EventKind | None = None
    reply_text: str | None = None
    generation: GenerationResult | None = None
    delivery: DeliveryResult | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        if self.error is not None:
            return False
        return self.delivery is None or self.delivery.ok


class DispatchReport(BaseModel):
    """Summary of processing one webhook payload."""

    object: str | None = None
    ignored: bool = False
    outcomes: list[EventOutcome] = Field(default_factory=list)

    @property
    def event_count(self) -> int:
        return len(self.outcomes)

    @property
    def failure_count(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.succeeded)
