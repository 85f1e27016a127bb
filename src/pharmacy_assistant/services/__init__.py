"""Services: pharmacy directory, conversation store, follow-up and orchestration."""
from .conversation_store import ConversationStore, InMemoryConversationStore, get_conversation_store
from .directory import PharmacyDirectory, get_pharmacy_directory, rx_volume_message
from .followup import (
    CallbackScheduler,
    FollowUpEmail,
    LoggingCallbackScheduler,
    LoggingMailer,
    Mailer,
    generate_follow_up_email,
)
from .orchestrator import ConversationOrchestrator, build_orchestrator

__all__ = [
    "ConversationStore",
    "InMemoryConversationStore",
    "get_conversation_store",
    "PharmacyDirectory",
    "get_pharmacy_directory",
    "rx_volume_message",
    "CallbackScheduler",
    "Mailer",
    "FollowUpEmail",
    "LoggingCallbackScheduler",
    "LoggingMailer",
    "generate_follow_up_email",
    "ConversationOrchestrator",
    "build_orchestrator",
]
