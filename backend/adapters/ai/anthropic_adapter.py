"""
Anthropic Claude adapter for blog writing, editing and resume tailoring.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Optional

import anthropic

from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)


class AIConfigurationError(Exception):
    """Raised when a completion is requested without an API key."""
    pass


class AIGenerationError(Exception):
    """Raised when the model returns no usable content."""
    pass


async def _retry_with_backoff(coro_factory, max_retries=3, base_delay=1.0):
    """Retry an async operation with exponential backoff + jitter."""
    for attempt in range(max_retries + 1):
        try:
            return await coro_factory()
        except Exception as e:
            error_str = str(e).lower()
            is_transient = any(k in error_str for k in ["rate_limit", "429", "500", "502", "503", "504", "overloaded", "connection", "timeout"])
            if not is_transient or attempt == max_retries:
                raise
            delay = base_delay * (2 ** attempt) + random.uniform(0, 1)
            logger.warning("Transient API error (attempt %d/%d), retrying in %.1fs: %s", attempt + 1, max_retries, delay, str(e))
            await asyncio.sleep(delay)


@dataclass
class Completion:
    """Text completion with usage accounting."""

    text: str
    model: str
    input_tokens: int
    output_tokens: int
    stop_reason: Optional[str] = None


class AnthropicAdapter:
    """Thin wrapper over the Messages API."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        api_key = api_key if api_key is not None else settings.anthropic_api_key
        if api_key:
            self._client = anthropic.AsyncAnthropic(
                api_key=api_key,
                timeout=float(settings.anthropic_timeout),
            )
        else:
            self._client = None
        self._model = model or settings.anthropic_model
        self._max_tokens = settings.anthropic_max_tokens

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        prompt: str,
        max_tokens: Optional[int] = None,
        system: Optional[str] = None,
        temperature: Optional[float] = None,
        model: Optional[str] = None,
    ) -> Completion:
        """
        Send a single-turn prompt and return the first text block.

        Args:
            prompt: User message
            max_tokens: Output token cap (defaults to ANTHROPIC_MAX_TOKENS)
            system: Optional system prompt
            temperature: Optional sampling temperature
            model: Override the configured model for this call

        Raises:
            AIConfigurationError: No API key configured
            AIGenerationError: The response carried no text
        """
        if not self._client:
            raise AIConfigurationError("Anthropic API key not configured")

        kwargs = {
            "model": model or self._model,
            "max_tokens": max_tokens or self._max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system
        if temperature is not None:
            kwargs["temperature"] = temperature

        message = await _retry_with_backoff(lambda: self._client.messages.create(**kwargs))

        text_blocks = [block.text for block in message.content if getattr(block, "type", "text") == "text"]
        if not text_blocks:
            raise AIGenerationError("AI returned empty response")

        if message.stop_reason == "max_tokens":
            logger.warning(
                "Completion truncated (model=%s, max_tokens=%d)", kwargs["model"], kwargs["max_tokens"]
            )

        usage = getattr(message, "usage", None)
        return Completion(
            text=text_blocks[0],
            model=kwargs["model"],
            input_tokens=getattr(usage, "input_tokens", 0) or 0,
            output_tokens=getattr(usage, "output_tokens", 0) or 0,
            stop_reason=message.stop_reason,
        )


# Singleton instance
anthropic_adapter = AnthropicAdapter()
