"""
Conversation orchestrator for inbound pharmacy calls.

Per phone number a session moves through:

    NO_SESSION -> ACTIVE(new lead, collecting) -> ACTIVE(new lead, not collecting) -> ACTIVE(known)

or straight to ACTIVE(known) when the caller's number resolves to a profile.
Every operation returns a ChatResult; collaborator failures become a canned
message and never escape as exceptions.
"""
from __future__ import annotations

from typing import Optional

from pharmacy_assistant.core.exceptions import (
    CreateFailure,
    DirectoryError,
    FetchFailure,
    NoEmailAvailable,
    ReplyGenerationFailure,
    SessionNotFound,
)
from pharmacy_assistant.core.logging_config import ContextLogger, get_context_logger, get_logger
from pharmacy_assistant.core.models import (
    ContactInfo,
    ConversationState,
    MessageRole,
    PharmacyProfile,
    merge_partial,
)
from pharmacy_assistant.core.results import ChatResult, Err, ResultStatus, capture
from pharmacy_assistant.llm.extraction import LeadExtractionEngine
from pharmacy_assistant.llm.replies import ReplyGenerator
from pharmacy_assistant.services.conversation_store import ConversationStore
from pharmacy_assistant.services.directory import PharmacyDirectory
from pharmacy_assistant.services.followup import (
    CallbackScheduler,
    Mailer,
    generate_follow_up_email,
)

LOGGER = get_logger(__name__)

START_FAILED = "I apologize, but I'm having trouble connecting right now. Please try again."
START_FIRST = "Please start a new conversation first."
NOT_FOUND = "Conversation not found."
REPLY_FAILED = "I apologize, but I'm having trouble processing your message. Please try again."
CALLBACK_DECLINED = (
    "I apologize, but there was an issue scheduling the callback. Please try again or contact us directly."
)
CALLBACK_ERROR = "Sorry, there was an error scheduling the callback. Please try again."
NO_EMAIL = "Email address not available. Please provide an email address first."
EMAIL_DECLINED = "I apologize, but there was an issue sending the email. Please try again or contact us directly."
EMAIL_ERROR = "Sorry, there was an error sending the email. Please try again."
FETCH_FAILED = "Failed to fetch pharmacy data."


class ConversationOrchestrator:
    """Drives start / message / callback / e-mail / read for each caller."""

    def __init__(
        self,
        directory: PharmacyDirectory,
        store: ConversationStore,
        extractor: LeadExtractionEngine,
        replies: ReplyGenerator,
        scheduler: CallbackScheduler,
        mailer: Mailer,
        company_name: str = "Pharmesol",
    ):
        self.directory = directory
        self.store = store
        self.extractor = extractor
        self.replies = replies
        self.scheduler = scheduler
        self.mailer = mailer
        self.company_name = company_name

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _log(self, phone_number: str) -> ContextLogger:
        return get_context_logger(__name__, phone_number=phone_number)

    def _require_state(self, phone_number: str) -> ConversationState:
        state = self.store.get(phone_number)
        if state is None:
            raise SessionNotFound(phone_number)
        return state

    def known_caller_greeting(self, profile: PharmacyProfile) -> str:
        return (
            f"Hello! This is {self.company_name} calling for {profile.name}. "
            f"I see we're speaking with {profile.contact_person}. How can I help you today? "
            f"{self.directory.rx_volume_message(profile.rx_volume)}"
        )

    def new_caller_greeting(self) -> str:
        return (
            f"Hello! Thank you for calling {self.company_name}. We specialize in supporting high "
            "prescription volume pharmacies. May I get your pharmacy's name to better assist you?"
        )

    def _collect_lead_fields(self, state: ConversationState, text: str, log: ContextLogger) -> None:
        """Merge whatever the caller just told us; create the lead once the mandatory fields are in."""
        extracted = self.extractor.try_extract(text)
        if isinstance(extracted, Err):
            log.warning(f"Discarding extraction failure: {extracted.error}")
            return

        state.pending_fields = merge_partial(state.pending_fields, extracted.value)
        if not state.pending_fields.has_mandatory_fields():
            return

        state.collecting_info = False
        created = capture(
            self.directory.create,
            state.pending_fields,
            state.phone_number,
            errors=(CreateFailure,),
        )
        if isinstance(created, Err):
            # No second attempt: the session stays a lead that is no longer collecting.
            log.error(f"Error creating pharmacy: {created.error}")
            return

        state.attach_profile(created.value)
        log.info(f"New lead saved as pharmacy {created.value.id}")

    # ------------------------------------------------------------------
    # operations
    # ------------------------------------------------------------------

    def start(self, phone_number: str) -> ChatResult:
        """Open (or reopen) a session; any previous state for the number is replaced."""
        log = self._log(phone_number)
        log.info(f"Starting chat for phone: {phone_number}")

        try:
            profile = self.directory.find_by_phone(phone_number)
        except DirectoryError as exc:
            log.error(f"Error starting chat: {exc}")
            return ChatResult.fail(ResultStatus.LOOKUP_FAILED, START_FAILED)

        if profile is not None:
            state = ConversationState.for_known(phone_number, profile)
            greeting = self.known_caller_greeting(profile)
        else:
            state = ConversationState.for_new_lead(phone_number)
            greeting = self.new_caller_greeting()

        state.append(MessageRole.ASSISTANT, greeting)
        self.store.put(state)

        return ChatResult.ok(
            greeting,
            isNewLead=state.is_new_lead,
            pharmacy=profile.to_dict() if profile else None,
        )

    def message(self, phone_number: str, text: str) -> ChatResult:
        """Record the caller's message, advance lead collection and reply."""
        log = self._log(phone_number)
        try:
            state = self._require_state(phone_number)
        except SessionNotFound:
            return ChatResult.fail(ResultStatus.SESSION_NOT_FOUND, START_FIRST)

        state.append(MessageRole.USER, text)

        if state.collecting_info:
            self._collect_lead_fields(state, text, log)

        try:
            reply = self.replies.generate(state)
        except ReplyGenerationFailure as exc:
            log.error(f"Error processing message: {exc}")
            self.store.put(state)
            return ChatResult.fail(ResultStatus.REPLY_FAILED, REPLY_FAILED)

        state.append(MessageRole.ASSISTANT, reply)
        self.store.put(state)

        return ChatResult.ok(
            reply,
            collectingInfo=state.collecting_info,
            pharmacy=state.profile.to_dict() if state.profile else None,
        )

    def schedule_callback(
        self,
        phone_number: str,
        preferred_time: str,
        notes: Optional[str] = None,
    ) -> ChatResult:
        log = self._log(phone_number)
        try:
            state = self._require_state(phone_number)
        except SessionNotFound:
            return ChatResult.fail(ResultStatus.SESSION_NOT_FOUND, NOT_FOUND)

        contact = ContactInfo.from_state(state)
        try:
            scheduled = self.scheduler.schedule(contact, preferred_time, notes)
        except Exception as exc:
            log.error(f"Error scheduling callback: {exc}")
            return ChatResult.fail(ResultStatus.CALLBACK_FAILED, CALLBACK_ERROR)

        if not scheduled:
            return ChatResult.fail(ResultStatus.CALLBACK_FAILED, CALLBACK_DECLINED)

        state.append(MessageRole.SYSTEM, f"Callback scheduled for {preferred_time}.")
        self.store.put(state)
        return ChatResult.ok(
            f"Perfect! I've scheduled a callback for {preferred_time}. One of our specialists will "
            f"call you at {phone_number}. Thank you for your time today!"
        )

    def _email_contact(self, state: ConversationState) -> ContactInfo:
        contact = ContactInfo.from_state(state)
        if not contact.email:
            raise NoEmailAvailable(f"No email address for {state.phone_number}")
        return contact

    def send_follow_up_email(self, phone_number: str) -> ChatResult:
        log = self._log(phone_number)
        try:
            state = self._require_state(phone_number)
            contact = self._email_contact(state)
        except SessionNotFound:
            return ChatResult.fail(ResultStatus.SESSION_NOT_FOUND, NOT_FOUND)
        except NoEmailAvailable:
            return ChatResult.fail(ResultStatus.NO_EMAIL_AVAILABLE, NO_EMAIL)

        email = generate_follow_up_email(contact, self.company_name)
        try:
            sent = self.mailer.send(contact, email.subject, email.body)
        except Exception as exc:
            log.error(f"Error sending follow-up email: {exc}")
            return ChatResult.fail(ResultStatus.EMAIL_FAILED, EMAIL_ERROR)

        if not sent:
            return ChatResult.fail(ResultStatus.EMAIL_FAILED, EMAIL_DECLINED)

        state.append(MessageRole.SYSTEM, f"Follow-up email sent to {contact.email}.")
        self.store.put(state)
        return ChatResult.ok(
            f"Great! I've sent a follow-up email to {contact.email} with detailed information about "
            f"how {self.company_name} can help {contact.name}. You should receive it within a few minutes."
        )

    def get_conversation(self, phone_number: str) -> ChatResult:
        try:
            state = self._require_state(phone_number)
        except SessionNotFound:
            return ChatResult.fail(ResultStatus.SESSION_NOT_FOUND, NOT_FOUND)
        return ChatResult.ok(context=state.to_dict())

    def list_pharmacies(self) -> ChatResult:
        try:
            pharmacies = self.directory.list_all()
        except FetchFailure as exc:
            LOGGER.error(f"Error fetching pharmacies: {exc}")
            return ChatResult.fail(ResultStatus.FETCH_FAILED, FETCH_FAILED)
        return ChatResult.ok(pharmacies=[pharmacy.to_dict() for pharmacy in pharmacies])


def build_orchestrator() -> ConversationOrchestrator:
    """Wire the orchestrator from settings and the process-wide singletons."""
    from pharmacy_assistant.core.config import get_settings
    from pharmacy_assistant.llm.client import get_llm_client
    from pharmacy_assistant.services.conversation_store import get_conversation_store
    from pharmacy_assistant.services.directory import get_pharmacy_directory
    from pharmacy_assistant.services.followup import LoggingCallbackScheduler, LoggingMailer

    settings = get_settings()
    client = get_llm_client()
    return ConversationOrchestrator(
        directory=get_pharmacy_directory(),
        store=get_conversation_store(),
        extractor=LeadExtractionEngine(client, settings),
        replies=ReplyGenerator(client, settings),
        scheduler=LoggingCallbackScheduler(),
        mailer=LoggingMailer(),
        company_name=settings.company_name,
    )


__all__ = ["ConversationOrchestrator", "build_orchestrator"]
