"""Answer generation through an OpenAI-compatible chat-completions API."""
import logging
from functools import lru_cache
from typing import Optional

from openai import AsyncOpenAI

from tenantrag.config import Settings, get_settings
from tenantrag.errors import GenerationError

logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = "No response generated."


class AnswerGenerator:
    """Calls the chat-completions endpoint with a system prompt and the user's question.

    The client is created on first use. Provider failures are not retried;
    they surface as ``GenerationError``.
    """

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None):
        self.model = settings.openai_chat_model
        self.max_completion_tokens = settings.openai_max_completion_tokens
        self._settings = settings
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._settings.openai_api_key,
                base_url=self._settings.openai_base_url,
                timeout=self._settings.openai_timeout_seconds,
            )
        return self._client

    async def generate(self, system_prompt: str, question: str) -> str:
        """Return the first completion's text, or the fallback when it is empty."""
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": question},
                ],
                max_completion_tokens=self.max_completion_tokens,
            )
        except Exception as e:
            logger.error(f"Chat completion failed ({self.model}): {e}")
            raise GenerationError("Failed to process query") from e

        content = None
        if completion.choices:
            content = completion.choices[0].message.content
        return content or FALLBACK_RESPONSE


@lru_cache
def get_answer_generator() -> AnswerGenerator:
    """Dependency returning the cached generator (it owns the HTTP connection pool)."""
    return AnswerGenerator(get_settings())
