"""Text-generation provider used by the AI assistant.

Wraps the OpenAI chat completions API. Every failure (network, quota,
bad status, unusable response) comes out as ProviderError so callers
have a single thing to absorb. No retries.
"""
import logging
from typing import Dict, List, Optional

from openai import OpenAI, OpenAIError

from studyhub.config import Settings
from studyhub.core.errors import ProviderError

logger = logging.getLogger(__name__)


class CompletionProvider:
    """Chat-completions client configured from settings."""

    # Provider's name for turns written by the model
    assistant_role = "assistant"
    user_role = "user"

    def __init__(self, settings: Settings, client: Optional[OpenAI] = None):
        """Initialize provider; builds an OpenAI client unless one is given."""
        self.model = settings.OPENAI_MODEL
        self.client = client or OpenAI(
            api_key=settings.OPENAI_API_KEY,
            timeout=settings.OPENAI_TIMEOUT,
        )

    def complete(
        self,
        messages: List[Dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> str:
        """
        Generate a reply for the given chat messages.

        Args:
            messages: Messages in provider format: [{"role": ..., "content": ...}]
            max_tokens: Upper bound on generated tokens
            temperature: Sampling temperature

        Returns:
            Generated text

        Raises:
            ProviderError: If the call fails or the response has no text
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI API error: {str(e)}")
            raise ProviderError(f"Completion request failed: {e}") from e

        try:
            text = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise ProviderError("Malformed completion response") from e

        if not text or not text.strip():
            raise ProviderError("Empty completion response")

        return text.strip()
