"""Tests for reply generation, prompts and the product FAQ."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from pharmacy_assistant.core.config import Settings
from pharmacy_assistant.core.exceptions import LLMAPIError, ReplyGenerationFailure
from pharmacy_assistant.core.models import ConversationState, MessageRole, PartialPharmacyProfile
from pharmacy_assistant.llm.client import LLMClient
from pharmacy_assistant.llm.prompts import build_system_prompt
from pharmacy_assistant.llm.replies import ProductInfoResponder, ReplyGenerator


def make_settings(**overrides) -> Settings:
    return Settings(OPENAI_API_KEY="", ANTHROPIC_API_KEY="", **overrides)


def make_client(chat="Happy to help!", completion="false") -> MagicMock:
    client = MagicMock()
    client.generate_chat.return_value = chat
    client.generate_completion.return_value = completion
    return client


def conversation(*turns) -> ConversationState:
    state = ConversationState.for_new_lead("555")
    for role, content in turns:
        state.append(role, content)
    return state


class TestReplyGenerator:
    def test_full_transcript_is_sent_in_order(self):
        client = make_client()
        generator = ReplyGenerator(client=client, settings=make_settings(ENABLE_PRODUCT_FAQ=False))
        state = conversation(
            (MessageRole.ASSISTANT, "Hello!"),
            (MessageRole.USER, "We're Sunrise Pharmacy"),
            (MessageRole.ASSISTANT, "Great, who am I speaking with?"),
            (MessageRole.USER, "Dana"),
        )

        assert generator.generate(state) == "Happy to help!"

        messages = client.generate_chat.call_args.args[0]
        assert messages == [
            {"role": "assistant", "content": "Hello!"},
            {"role": "user", "content": "We're Sunrise Pharmacy"},
            {"role": "assistant", "content": "Great, who am I speaking with?"},
            {"role": "user", "content": "Dana"},
        ]

    def test_follow_up_notes_go_to_system_prompt_not_turns(self):
        client = make_client()
        generator = ReplyGenerator(client=client, settings=make_settings(ENABLE_PRODUCT_FAQ=False))
        state = conversation(
            (MessageRole.ASSISTANT, "Hello!"),
            (MessageRole.SYSTEM, "Callback scheduled for tomorrow 2pm."),
            (MessageRole.USER, "Thanks"),
        )

        generator.generate(state)

        messages = client.generate_chat.call_args.args[0]
        assert all(m["role"] != "system" for m in messages)
        assert "Callback scheduled for tomorrow 2pm." in client.generate_chat.call_args.kwargs["system_prompt"]

    def test_llm_error_raises_reply_failure(self):
        client = make_client()
        client.generate_chat.side_effect = LLMAPIError("down")
        generator = ReplyGenerator(client=client, settings=make_settings(ENABLE_PRODUCT_FAQ=False))
        with pytest.raises(ReplyGenerationFailure):
            generator.generate(conversation((MessageRole.USER, "Hi")))

    def test_empty_reply_raises_reply_failure(self):
        generator = ReplyGenerator(client=make_client(chat=""), settings=make_settings(ENABLE_PRODUCT_FAQ=False))
        with pytest.raises(ReplyGenerationFailure):
            generator.generate(conversation((MessageRole.USER, "Hi")))

    def test_unconfigured_client_fails_reply(self):
        settings = make_settings(ENABLE_PRODUCT_FAQ=False)
        generator = ReplyGenerator(client=LLMClient(settings), settings=settings)
        with pytest.raises(ReplyGenerationFailure):
            generator.generate(conversation((MessageRole.USER, "Hi")))

    def test_product_question_answered_with_overview(self):
        client = make_client(completion="true")
        generator = ReplyGenerator(client=client, settings=make_settings())

        reply = generator.generate(conversation((MessageRole.USER, "What does Pharmesol do?")))

        assert reply.startswith("Pharmesol is a comprehensive platform")
        client.generate_chat.assert_not_called()

    def test_faq_disabled_skips_detection(self):
        client = make_client(completion="true")
        generator = ReplyGenerator(client=client, settings=make_settings(ENABLE_PRODUCT_FAQ=False))

        generator.generate(conversation((MessageRole.USER, "What does Pharmesol do?")))

        client.generate_completion.assert_not_called()
        client.generate_chat.assert_called_once()


class TestProductInfoResponder:
    def test_detection_answer_parsing(self):
        responder = ProductInfoResponder(make_client(completion=" True \n"), "Pharmesol")
        assert responder.is_product_question("what is pharmesol?")

    def test_falls_back_to_keywords_on_llm_error(self):
        client = make_client()
        client.generate_completion.side_effect = LLMAPIError("down")
        responder = ProductInfoResponder(client, "Pharmesol")

        assert responder.is_product_question("Tell me about Pharmesol")
        assert responder.is_product_question("What services do you have?")
        assert not responder.is_product_question("Is ibuprofen safe with lisinopril?")


class TestSystemPrompt:
    def test_returning_caller_details(self, known_profile):
        state = ConversationState.for_known(known_profile.phone, known_profile)
        prompt = build_system_prompt(state, "Pharmesol")
        assert "Pharmacy: HealthFirst Pharmacy" in prompt
        assert "Monthly Rx Volume: 8,400" in prompt
        assert "NEW CALLER" not in prompt

    def test_new_caller_collecting(self):
        state = ConversationState.for_new_lead("555")
        state.pending_fields = PartialPharmacyProfile(name="Sunrise")
        prompt = build_system_prompt(state, "Pharmesol")
        assert "NEW CALLER" in prompt
        assert "- name: Sunrise" in prompt
        assert "Ask for one piece of information at a time." in prompt
