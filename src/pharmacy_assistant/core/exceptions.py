"""Custom exceptions for the pharmacy sales-assistant backend."""
from __future__ import annotations


class PharmacyAssistantError(Exception):
    """Base exception for all application errors."""

    pass


# =============================================================================
# Pharmacy Directory Errors
# =============================================================================


class DirectoryError(PharmacyAssistantError):
    """Base exception for pharmacy record store failures."""

    pass


class LookupFailure(DirectoryError):
    """Raised when fetching records for a phone lookup fails."""

    pass


class FetchFailure(DirectoryError):
    """Raised when listing all pharmacy records fails."""

    pass


class CreateFailure(DirectoryError):
    """Raised when submitting a new pharmacy record fails."""

    pass


# =============================================================================
# Conversation Errors
# =============================================================================


class ConversationError(PharmacyAssistantError):
    """Base exception for conversation state errors."""

    pass


class SessionNotFound(ConversationError):
    """Raised when no conversation exists for a phone number."""

    def __init__(self, phone_number: str):
        super().__init__(f"No conversation for {phone_number}")
        self.phone_number = phone_number


class NoEmailAvailable(ConversationError):
    """Raised when a follow-up e-mail is requested but no address is known."""

    pass


# =============================================================================
# LLM Errors
# =============================================================================


class LLMError(PharmacyAssistantError):
    """Base exception for LLM-related errors."""

    pass


class LLMAPIError(LLMError):
    """Raised when the LLM API returns an error."""

    pass


class LLMRateLimitError(LLMAPIError):
    """Raised when the LLM API rate limit is exceeded."""

    pass


class LLMTimeoutError(LLMAPIError):
    """Raised when the LLM API request times out."""

    pass


class ExtractionFailure(LLMError):
    """Raised when an utterance cannot be turned into a partial record."""

    pass


class ReplyGenerationFailure(LLMError):
    """Raised when no assistant reply could be produced."""

    pass


__all__ = [
    # Base
    "PharmacyAssistantError",
    # Directory
    "DirectoryError",
    "LookupFailure",
    "FetchFailure",
    "CreateFailure",
    # Conversation
    "ConversationError",
    "SessionNotFound",
    "NoEmailAvailable",
    # LLM
    "LLMError",
    "LLMAPIError",
    "LLMRateLimitError",
    "LLMTimeoutError",
    "ExtractionFailure",
    "ReplyGenerationFailure",
]
