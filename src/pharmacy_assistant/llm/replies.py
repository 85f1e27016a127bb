"""Assistant reply generation over the full conversation transcript."""
from __future__ import annotations

from typing import Dict, List, Optional

from pharmacy_assistant.core.config import Settings, get_settings
from pharmacy_assistant.core.exceptions import LLMError, ReplyGenerationFailure
from pharmacy_assistant.core.logging_config import get_logger
from pharmacy_assistant.core.models import ConversationState, MessageRole
from pharmacy_assistant.llm.client import LLMClient, get_llm_client
from pharmacy_assistant.llm.prompts import (
    build_product_question_prompt,
    build_system_prompt,
    company_overview,
)

LOGGER = get_logger(__name__)


class ProductInfoResponder:
    """
    Detects questions about the company itself and answers them with fixed text.

    Detection asks the LLM for a literal true/false. If that call fails the
    message is checked against a keyword list instead.
    """

    KEYWORDS = (
        "what services",
        "what features",
        "what do you offer",
        "what can you help",
        "services available",
        "features available",
        "pharmacy solutions",
        "pharmacy tools",
        "pharmacy systems",
        "inventory management",
        "prescription management",
        "what solutions",
        "what tools",
        "capabilities",
        "offerings",
    )

    def __init__(self, client: LLMClient, company_name: str, max_tokens: int = 10):
        self.client = client
        self.company_name = company_name
        self.max_tokens = max_tokens

    def keyword_match(self, message: str) -> bool:
        lower = message.lower()
        name = self.company_name.lower()
        keywords = (name, f"about {name}", f"what is {name}", *self.KEYWORDS)
        return any(keyword in lower for keyword in keywords)

    def is_product_question(self, message: str) -> bool:
        try:
            answer = self.client.generate_completion(
                build_product_question_prompt(message, self.company_name),
                temperature=0.1,
                max_tokens=self.max_tokens,
                fast=True,
            )
        except LLMError as exc:
            LOGGER.error(f"Product question detection failed, using keywords: {exc}")
            return self.keyword_match(message)
        return answer.strip().lower() == "true"

    def overview(self) -> str:
        return company_overview(self.company_name)


class ReplyGenerator:
    """Produces the next assistant utterance from the whole ordered transcript."""

    def __init__(
        self,
        client: Optional[LLMClient] = None,
        settings: Optional[Settings] = None,
        product_info: Optional[ProductInfoResponder] = None,
    ):
        self.settings = settings or get_settings()
        self.client = client or get_llm_client()
        if product_info is None and self.settings.enable_product_faq:
            product_info = ProductInfoResponder(self.client, self.settings.company_name)
        self.product_info = product_info

    def _transcript_turns(self, state: ConversationState) -> List[Dict[str, str]]:
        return [
            {"role": message.role.value, "content": message.content}
            for message in state.transcript
            if message.role is not MessageRole.SYSTEM
        ]

    def generate(self, state: ConversationState) -> str:
        """
        Generate a reply for ``state``.

        Raises:
            ReplyGenerationFailure: if the model errors or returns nothing.
        """
        latest = state.last_user_message()
        if self.product_info is not None and latest and self.product_info.is_product_question(latest):
            LOGGER.info("Answering product question with company overview")
            return self.product_info.overview()

        system_prompt = build_system_prompt(state, self.settings.company_name)
        try:
            reply = self.client.generate_chat(
                self._transcript_turns(state),
                system_prompt=system_prompt,
                temperature=self.settings.chat_temperature,
                max_tokens=self.settings.chat_max_tokens,
            )
        except LLMError as exc:
            raise ReplyGenerationFailure(f"Reply generation failed: {exc}") from exc

        if not reply:
            raise ReplyGenerationFailure("Reply generation returned no content")
        return reply


__all__ = ["ProductInfoResponder", "ReplyGenerator"]
