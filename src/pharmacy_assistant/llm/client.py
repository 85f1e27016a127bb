"""Centralized LLM client supporting OpenAI and Anthropic (Claude) with error translation.

Every call is made exactly once: SDK-level retries are disabled and there is no
fallback to the other provider.
"""
from __future__ import annotations

import time
from typing import Dict, List, Optional, Sequence

from anthropic import Anthropic, APIError as AnthropicAPIError
from anthropic import APITimeoutError as AnthropicTimeoutError
from anthropic import RateLimitError as AnthropicRateLimitError
from openai import APIError, APITimeoutError, OpenAI, RateLimitError

from pharmacy_assistant.core.config import Settings, get_settings
from pharmacy_assistant.core.exceptions import LLMAPIError, LLMRateLimitError, LLMTimeoutError
from pharmacy_assistant.core.logging_config import get_logger, log_external_call

LOGGER = get_logger(__name__)

DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant for a pharmacy services company."

ChatTurn = Dict[str, str]


def _create_openai_client(settings: Settings) -> Optional[OpenAI]:
    """Create a new OpenAI client instance with configured timeout."""
    if not settings.openai_api_key:
        return None

    return OpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.openai_timeout_seconds,
        max_retries=0,
    )


def _create_anthropic_client(settings: Settings) -> Optional[Anthropic]:
    """Create a new Anthropic client instance."""
    if not settings.anthropic_api_key:
        return None

    return Anthropic(
        api_key=settings.anthropic_api_key,
        timeout=settings.anthropic_timeout_seconds,
        max_retries=0,
    )


class LLMClient:
    """Unified chat-completion client; OpenAI is preferred when both providers are configured."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()
        self.openai_client = _create_openai_client(settings)
        self.anthropic_client = _create_anthropic_client(settings)

        if self.openai_client:
            self.provider = "openai"
            self.model = settings.openai_model
            self.fast_model = settings.openai_extraction_model
            LOGGER.info(f"LLM client initialized with OpenAI (model: {self.model})")
        elif self.anthropic_client:
            self.provider = "anthropic"
            self.model = settings.anthropic_model
            self.fast_model = settings.anthropic_model
            LOGGER.info(f"LLM client initialized with Anthropic (model: {self.model})")
        else:
            self.provider = None
            self.model = None
            self.fast_model = None
            LOGGER.warning("No LLM provider configured - LLM features unavailable")

    def is_available(self) -> bool:
        """Check if any LLM provider is available."""
        return self.provider is not None

    def generate_completion(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.1,
        max_tokens: int = 200,
        fast: bool = True,
    ) -> str:
        """
        Generate a completion for a single user prompt.

        Args:
            prompt: The user prompt.
            system_prompt: Optional system prompt.
            temperature: Sampling temperature.
            max_tokens: Maximum tokens to generate.
            fast: Use the cheaper extraction model instead of the chat model.

        Returns:
            Generated text content, or "" when no provider is configured.

        Raises:
            LLMAPIError: If the API call fails.
            LLMRateLimitError: If rate limit is exceeded.
            LLMTimeoutError: If the request times out.
        """
        return self.generate_chat(
            [{"role": "user", "content": prompt}],
            system_prompt=system_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
            fast=fast,
        )

    def generate_chat(
        self,
        messages: Sequence[ChatTurn],
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 500,
        fast: bool = False,
    ) -> str:
        """
        Generate the next assistant turn for an ordered list of user/assistant turns.

        Raises the same errors as :meth:`generate_completion`.
        """
        if not self.is_available():
            LOGGER.warning("LLM client not available, returning empty string")
            return ""

        model = self.fast_model if fast else self.model
        started = time.perf_counter()
        success = False
        try:
            if self.provider == "openai":
                content = self._generate_openai(messages, system_prompt, model, temperature, max_tokens)
            else:
                content = self._generate_anthropic(messages, system_prompt, model, temperature, max_tokens)
            success = True
            return content
        finally:
            log_external_call(
                LOGGER,
                self.provider,
                "chat_completion",
                success,
                (time.perf_counter() - started) * 1000,
                model=model,
                turns=len(messages),
            )

    def _generate_openai(
        self,
        messages: Sequence[ChatTurn],
        system_prompt: Optional[str],
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Generate completion using OpenAI."""
        payload: List[ChatTurn] = []
        if system_prompt:
            payload.append({"role": "system", "content": system_prompt})
        payload.extend(messages)

        try:
            response = self.openai_client.chat.completions.create(
                model=model,
                messages=payload,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except RateLimitError as exc:
            LOGGER.error("OpenAI rate limit exceeded: %s", exc)
            raise LLMRateLimitError(f"Rate limit exceeded: {exc}") from exc
        except APITimeoutError as exc:
            LOGGER.error("OpenAI request timed out: %s", exc)
            raise LLMTimeoutError(f"Request timed out: {exc}") from exc
        except APIError as exc:
            LOGGER.error("OpenAI API error: %s", exc)
            raise LLMAPIError(f"API error: {exc}") from exc
        except Exception as exc:
            LOGGER.exception("Unexpected error during OpenAI generation")
            raise LLMAPIError(f"Unexpected error: {exc}") from exc

        if not response.choices:
            return ""
        content = response.choices[0].message.content
        return content.strip() if content else ""

    def _generate_anthropic(
        self,
        messages: Sequence[ChatTurn],
        system_prompt: Optional[str],
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Generate completion using Anthropic Claude."""
        system = system_prompt or DEFAULT_SYSTEM_PROMPT
        turns = list(messages)
        # Claude conversations must open with a user turn; earlier assistant
        # turns (the greeting) move into the system prompt.
        opening = []
        while turns and turns[0]["role"] == "assistant":
            opening.append(turns.pop(0)["content"])
        if opening:
            system += "\n\nYou opened the call with:\n" + "\n".join(opening)

        try:
            message = self.anthropic_client.messages.create(
                model=model,
                max_tokens=max_tokens,
                system=system,
                messages=turns,
                temperature=temperature,
            )
        except AnthropicRateLimitError as exc:
            LOGGER.error("Anthropic rate limit exceeded: %s", exc)
            raise LLMRateLimitError(f"Rate limit exceeded: {exc}") from exc
        except AnthropicTimeoutError as exc:
            LOGGER.error("Anthropic request timed out: %s", exc)
            raise LLMTimeoutError(f"Request timed out: {exc}") from exc
        except AnthropicAPIError as exc:
            LOGGER.error("Anthropic API error: %s", exc)
            raise LLMAPIError(f"API error: {exc}") from exc
        except Exception as exc:
            LOGGER.exception("Unexpected error during Anthropic generation")
            raise LLMAPIError(f"Unexpected error: {exc}") from exc

        content = message.content[0].text if message.content else ""
        return content.strip()


# Global instance
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create the global LLM client instance."""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client


def reset_llm_client() -> None:
    """Reset the global LLM client (useful for testing)."""
    global _llm_client
    _llm_client = None


__all__ = [
    "LLMClient",
    "get_llm_client",
    "reset_llm_client",
]
