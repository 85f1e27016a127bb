"""Shared dependencies for FastAPI routes."""
from __future__ import annotations

from functools import lru_cache

from pharmacy_assistant.services.orchestrator import ConversationOrchestrator, build_orchestrator


@lru_cache
def get_orchestrator() -> ConversationOrchestrator:
    """
    FastAPI dependency that provides the process-wide orchestrator.

    Tests replace it through ``app.dependency_overrides``.
    """
    return build_orchestrator()


__all__ = ["get_orchestrator"]
