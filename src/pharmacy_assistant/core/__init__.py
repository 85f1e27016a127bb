"""Core module exports."""
from __future__ import annotations

from pharmacy_assistant.core.config import Settings, get_settings, reload_settings
from pharmacy_assistant.core.exceptions import (
    # Base
    PharmacyAssistantError,
    # Directory
    DirectoryError,
    LookupFailure,
    FetchFailure,
    CreateFailure,
    # Conversation
    ConversationError,
    SessionNotFound,
    NoEmailAvailable,
    # LLM
    LLMError,
    LLMAPIError,
    LLMRateLimitError,
    LLMTimeoutError,
    ExtractionFailure,
    ReplyGenerationFailure,
)
from pharmacy_assistant.core.logging_config import (
    setup_logging,
    get_logger,
    get_context_logger,
    log_external_call,
    JSONFormatter,
    ContextLogger,
)
from pharmacy_assistant.core.models import (
    ChatMessage,
    ContactInfo,
    ConversationState,
    MessageRole,
    PartialPharmacyProfile,
    PharmacyProfile,
    PrescriptionItem,
    derive_rx_volume,
    merge_partial,
)
from pharmacy_assistant.core.phone import normalize_phone, phones_match
from pharmacy_assistant.core.results import ChatResult, Err, Ok, ResultStatus, capture

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "reload_settings",
    # Models
    "ChatMessage",
    "ContactInfo",
    "ConversationState",
    "MessageRole",
    "PartialPharmacyProfile",
    "PharmacyProfile",
    "PrescriptionItem",
    "derive_rx_volume",
    "merge_partial",
    # Phone
    "normalize_phone",
    "phones_match",
    # Results
    "ChatResult",
    "Err",
    "Ok",
    "ResultStatus",
    "capture",
    # Exceptions
    "PharmacyAssistantError",
    "DirectoryError",
    "LookupFailure",
    "FetchFailure",
    "CreateFailure",
    "ConversationError",
    "SessionNotFound",
    "NoEmailAvailable",
    "LLMError",
    "LLMAPIError",
    "LLMRateLimitError",
    "LLMTimeoutError",
    "ExtractionFailure",
    "ReplyGenerationFailure",
    # Logging
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "log_external_call",
    "JSONFormatter",
    "ContextLogger",
]
