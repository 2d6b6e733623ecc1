"""Canned replies for postback buttons."""

from src.constants import POSTBACK_REPLIES, UNKNOWN_POSTBACK_REPLY


def resolve_postback(payload: str | None) -> str:
    """Map a postback payload to its canned reply.

    Unknown (or missing) payloads get a generic fallback.
    """
    if payload is None:
        return UNKNOWN_POSTBACK_REPLY
    return POSTBACK_REPLIES.get(payload, UNKNOWN_POSTBACK_REPLY)
