"""Pytest configuration and fixtures."""
from __future__ import annotations

import os
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

# Set test environment BEFORE importing config
os.environ.setdefault("ENVIRONMENT", "test")
os.environ["OPENAI_API_KEY"] = ""
os.environ["ANTHROPIC_API_KEY"] = ""

from pharmacy_assistant.core.exceptions import ReplyGenerationFailure
from pharmacy_assistant.core.models import (
    ConversationState,
    PartialPharmacyProfile,
    PharmacyProfile,
)
from pharmacy_assistant.core.results import Ok
from pharmacy_assistant.services.conversation_store import InMemoryConversationStore
from pharmacy_assistant.services.directory import PharmacyDirectory, rx_volume_message
from pharmacy_assistant.services.orchestrator import ConversationOrchestrator

KNOWN_PHONE = "+1-555-123-4567"
NEW_PHONE = "+1-555-999-0000"


def healthfirst_record() -> Dict[str, Any]:
    """Directory record whose prescriptions project to 8,400 Rx/month."""
    return {
        "id": "1",
        "name": "HealthFirst Pharmacy",
        "phone": KNOWN_PHONE,
        "city": "New York",
        "state": "NY",
        "email": "contact@healthfirst.com",
        "prescriptions": [
            {"drug": "Lisinopril", "count": 120},
            {"drug": "Atorvastatin", "count": 100},
            {"drug": "Metformin", "count": 60},
        ],
    }


class FakeExtractor:
    """Returns queued extraction outcomes in order, then empty partial records."""

    def __init__(self, outcomes: Optional[List[Any]] = None):
        self.outcomes = list(outcomes or [])
        self.calls: List[str] = []

    def try_extract(self, utterance: str):
        self.calls.append(utterance)
        if self.outcomes:
            return self.outcomes.pop(0)
        return Ok(PartialPharmacyProfile())


class FakeReplies:
    """Records the transcript it was given and returns queued replies."""

    def __init__(self, replies: Optional[List[str]] = None):
        self.replies = list(replies or [])
        self.seen: List[List[tuple]] = []
        self.fail_with: Optional[Exception] = None

    def generate(self, state: ConversationState) -> str:
        self.seen.append([(m.role.value, m.content) for m in state.transcript])
        if self.fail_with is not None:
            raise self.fail_with
        if self.replies:
            return self.replies.pop(0)
        return "How else can I help?"

    def fail(self) -> None:
        self.fail_with = ReplyGenerationFailure("model unavailable")


@pytest.fixture
def known_profile() -> PharmacyProfile:
    return PharmacyProfile.from_directory_record(healthfirst_record())


@pytest.fixture
def directory(known_profile) -> MagicMock:
    """Directory that knows KNOWN_PHONE only."""
    mock = MagicMock(spec=PharmacyDirectory)

    def find_by_phone(phone: str):
        return known_profile if phone == KNOWN_PHONE else None

    mock.find_by_phone.side_effect = find_by_phone
    mock.list_all.return_value = [known_profile]
    mock.rx_volume_message.side_effect = rx_volume_message
    return mock


@pytest.fixture
def store() -> InMemoryConversationStore:
    return InMemoryConversationStore()


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
def replies() -> FakeReplies:
    return FakeReplies()


@pytest.fixture
def scheduler() -> MagicMock:
    mock = MagicMock()
    mock.schedule.return_value = True
    return mock


@pytest.fixture
def mailer() -> MagicMock:
    mock = MagicMock()
    mock.send.return_value = True
    return mock


@pytest.fixture
def orchestrator(directory, store, extractor, replies, scheduler, mailer) -> ConversationOrchestrator:
    return ConversationOrchestrator(
        directory=directory,
        store=store,
        extractor=extractor,
        replies=replies,
        scheduler=scheduler,
        mailer=mailer,
        company_name="Pharmesol",
    )
