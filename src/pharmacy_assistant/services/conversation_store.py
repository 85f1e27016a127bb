"""Process-wide mapping from phone number to conversation state."""
from __future__ import annotations

import threading
from typing import Dict, Optional, Protocol

from pharmacy_assistant.core.logging_config import get_logger
from pharmacy_assistant.core.models import ConversationState

LOGGER = get_logger(__name__)


class ConversationStore(Protocol):
    def get(self, phone_number: str) -> Optional[ConversationState]: ...

    def put(self, state: ConversationState) -> None: ...

    def delete(self, phone_number: str) -> bool: ...

    def __contains__(self, phone_number: object) -> bool: ...

    def __len__(self) -> int: ...


class InMemoryConversationStore:
    """
    Dict-backed store, lost on restart.

    The lock only protects the index. A get-mutate-put sequence on the same
    phone number is not atomic and concurrent writers race (last put wins).
    """

    def __init__(self) -> None:
        self._states: Dict[str, ConversationState] = {}
        self._lock = threading.Lock()

    def get(self, phone_number: str) -> Optional[ConversationState]:
        with self._lock:
            return self._states.get(phone_number)

    def put(self, state: ConversationState) -> None:
        """Store ``state`` under its phone number, replacing any previous session."""
        with self._lock:
            replaced = state.phone_number in self._states
            self._states[state.phone_number] = state
        if replaced:
            LOGGER.debug(f"Replaced existing conversation for {state.phone_number}")

    def delete(self, phone_number: str) -> bool:
        with self._lock:
            return self._states.pop(phone_number, None) is not None

    def __contains__(self, phone_number: object) -> bool:
        with self._lock:
            return phone_number in self._states

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)


_store: Optional[InMemoryConversationStore] = None


def get_conversation_store() -> InMemoryConversationStore:
    """Get or create the process-wide store used by the API."""
    global _store
    if _store is None:
        _store = InMemoryConversationStore()
    return _store


__all__ = ["ConversationStore", "InMemoryConversationStore", "get_conversation_store"]
