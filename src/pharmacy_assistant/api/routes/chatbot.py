"""
Chatbot routes - inbound call sessions keyed by caller phone number.

Every operation answers 200 with ``{"success": ..., ...}``; failures carry a
user-facing ``message`` and an ``error`` tag instead of an HTTP error status.
Only malformed request bodies are rejected (422).
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from pharmacy_assistant.api.deps import get_orchestrator
from pharmacy_assistant.core.logging_config import get_logger
from pharmacy_assistant.services.orchestrator import ConversationOrchestrator

router = APIRouter()
LOGGER = get_logger(__name__)


class StartChatRequest(BaseModel):
    """Open a session for a caller."""
    model_config = ConfigDict(populate_by_name=True)

    phone_number: str = Field(..., alias="phoneNumber", min_length=1)


class SendMessageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone_number: str = Field(..., alias="phoneNumber", min_length=1)
    message: str = Field(..., min_length=1)


class ScheduleCallbackRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone_number: str = Field(..., alias="phoneNumber", min_length=1)
    preferred_time: str = Field(..., alias="preferredTime", min_length=1)
    notes: Optional[str] = None


class SendEmailRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone_number: str = Field(..., alias="phoneNumber", min_length=1)


@router.post("/start")
def start_chat(
    request: StartChatRequest,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """Greet the caller; known numbers get a personalised greeting."""
    return orchestrator.start(request.phone_number).to_dict()


@router.post("/message")
def send_message(
    request: SendMessageRequest,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """Record the caller's message and return the assistant's reply."""
    return orchestrator.message(request.phone_number, request.message).to_dict()


@router.post("/schedule-callback")
def schedule_callback(
    request: ScheduleCallbackRequest,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    return orchestrator.schedule_callback(
        request.phone_number, request.preferred_time, request.notes
    ).to_dict()


@router.post("/send-email")
def send_email(
    request: SendEmailRequest,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    return orchestrator.send_follow_up_email(request.phone_number).to_dict()


@router.get("/conversation/{phone_number}")
def get_conversation(
    phone_number: str,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """Read-only snapshot of a session."""
    return orchestrator.get_conversation(phone_number).to_dict()


@router.get("/pharmacies")
def list_pharmacies(
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    return orchestrator.list_pharmacies().to_dict()
