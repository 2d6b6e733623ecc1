"""Gemini reply generation using PydanticAI."""

import logging
import time
from functools import lru_cache

import logfire
from pydantic_ai import Agent
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.providers.google import GoogleProvider

from src.config import Settings
from src.constants import (
    DEFAULT_GEMINI_MODEL,
    GENERATION_FALLBACK_REPLY,
    REPLY_PROMPT_TEMPLATE,
)
from src.models.agent_models import GenerationResult

logger = logging.getLogger(__name__)


class GeminiNotConfiguredError(Exception):
    """Raised when a reply is requested without a Gemini API key."""

    pass


def build_reply_prompt(user_message: str) -> str:
    """Embed the user's message in the customer-service prompt."""
    return REPLY_PROMPT_TEMPLATE.format(user_message=user_message)


class GeminiReplyService:
    """Generate customer-service replies with Gemini.

    A single model call per message. Any failure yields the fixed
    apology text instead of an exception.
    """

    def __init__(
        self,
        api_key: str | None,
        model_name: str = DEFAULT_GEMINI_MODEL,
        agent: Agent | None = None,
    ):
        """
        Args:
            api_key: Gemini API key; generation falls back when unset
            model_name: Gemini model name
            agent: Optional pre-built agent, mainly for tests
        """
        self._api_key = api_key
        self._model_name = model_name
        self._agent = agent

    @classmethod
    def from_settings(
        cls, settings: Settings, agent: Agent | None = None
    ) -> "GeminiReplyService":
        return cls(settings.gemini_api_key, settings.gemini_model, agent=agent)

    @property
    def model_name(self) -> str:
        return self._model_name

    def _get_agent(self) -> Agent:
        """Create the Gemini-backed agent on first use."""
        if self._agent is None:
            if not self._api_key:
                raise GeminiNotConfiguredError("GEMINI_API_KEY is not configured")
            model = GoogleModel(
                self._model_name,
                provider=GoogleProvider(api_key=self._api_key),
            )
            self._agent = Agent(model, output_type=str)
            logger.info("GeminiReplyService initialized with model: %s", self._model_name)
        return self._agent

    async def generate(self, user_message: str) -> GenerationResult:
        """
        Generate a reply to a user's message.

        Args:
            user_message: Free text sent by the user

        Returns:
            GenerationResult; on failure ``text`` is the apology string
        """
        start_time = time.time()
        prompt = build_reply_prompt(user_message)

        try:
            agent = self._get_agent()
            result = await agent.run(prompt)
            reply = (result.output or "").strip()
            if not reply:
                raise ValueError("Gemini returned an empty reply")
        except Exception as e:
            logfire.error(
                "Error calling Gemini API",
                model=self._model_name,
                error=str(e),
                error_type=type(e).__name__,
                response_time_ms=(time.time() - start_time) * 1000,
            )
            return GenerationResult(
                text=GENERATION_FALLBACK_REPLY,
                ok=False,
                used_fallback=True,
                error=f"{type(e).__name__}: {e}",
            )

        logfire.info(
            "Gemini response generated",
            model=self._model_name,
            prompt_length=len(prompt),
            reply_length=len(reply),
            response_time_ms=(time.time() - start_time) * 1000,
        )
        return GenerationResult(text=reply)


@lru_cache(maxsize=8)
def cached_reply_service(api_key: str | None, model_name: str) -> GeminiReplyService:
    """One service, and so one Gemini client, per key and model."""
    return GeminiReplyService(api_key, model_name)


def get_reply_service(settings: Settings) -> GeminiReplyService:
    """Factory function for dependency injection."""
    return cached_reply_service(settings.gemini_api_key, settings.gemini_model)
