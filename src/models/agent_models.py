"""Reply generation result model."""

from pydantic import BaseModel, Field


class GenerationResult(BaseModel):
    """
    Outcome of a reply generation attempt.

    ``text`` is always sendable: on failure it holds the fixed apology
    and ``error`` describes what went wrong.
    """

    text: str = Field(..., description="Reply text to send to the user")
    ok: bool = Field(
        default=True, description="Whether the model produced the reply"
    )
    used_fallback: bool = Field(
        default=False, description="Whether the apology text was substituted"
    )
    error: str | None = Field(
        default=None, description="Error description when generation failed"
    )
