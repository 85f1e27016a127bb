"""Follow-up collaborators: callback scheduling and e-mail.

Only logging implementations ship here; delivery backends plug in through the
``CallbackScheduler`` and ``Mailer`` protocols.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from pharmacy_assistant.core.logging_config import get_logger
from pharmacy_assistant.core.models import ContactInfo
from pharmacy_assistant.core.utils import format_count

LOGGER = get_logger(__name__)


class CallbackScheduler(Protocol):
    def schedule(self, contact: ContactInfo, preferred_time: str, notes: Optional[str] = None) -> bool: ...


class Mailer(Protocol):
    def send(self, contact: ContactInfo, subject: str, body: str) -> bool: ...


@dataclass(frozen=True)
class FollowUpEmail:
    subject: str
    body: str


class LoggingCallbackScheduler:
    """Records callback requests in the log and reports success."""

    def schedule(self, contact: ContactInfo, preferred_time: str, notes: Optional[str] = None) -> bool:
        try:
            LOGGER.info(f"[MOCK] Scheduling callback for {contact.name}")
            LOGGER.info(f"[MOCK] Contact: {contact.contact_person} at {contact.phone}")
            LOGGER.info(f"[MOCK] Preferred time: {preferred_time}")
            if notes:
                LOGGER.info(f"[MOCK] Notes: {notes}")
            LOGGER.info(f"[MOCK] Callback scheduled successfully for {preferred_time}")
            return True
        except Exception as exc:
            LOGGER.error(f"[MOCK] Failed to schedule callback: {exc}")
            return False


class LoggingMailer:
    """Records outgoing e-mails in the log and reports success."""

    def send(self, contact: ContactInfo, subject: str, body: str) -> bool:
        try:
            LOGGER.info(f"[MOCK] Sending email to {contact.email}")
            LOGGER.info(f"[MOCK] Subject: {subject}")
            LOGGER.debug(f"[MOCK] Content: {body}")
            LOGGER.info(f"[MOCK] Email sent successfully to {contact.contact_person} at {contact.email}")
            return True
        except Exception as exc:
            LOGGER.error(f"[MOCK] Failed to send email: {exc}")
            return False


def generate_follow_up_email(contact: ContactInfo, company_name: str = "Pharmesol") -> FollowUpEmail:
    """Fill the follow-up template from the contact's details."""
    volume = format_count(contact.rx_volume) if contact.rx_volume else None
    volume_line = volume or "To be determined"
    volume_phrase = f"{volume}+" if volume else "high volumes of"
    sales_address = company_name.lower().replace(" ", "")

    subject = f"Follow-up: {company_name} Solutions for {contact.name}"
    body = f"""Dear {contact.contact_person},

Thank you for taking the time to speak with us today about how {company_name} can support {contact.name}.

Based on our conversation, here's what we discussed:
- Your current monthly prescription volume: {volume_line}
- Location: {contact.address or "To be confirmed"}

How {company_name} can help your pharmacy:
• Streamlined prescription processing for high-volume operations
• Cost reduction strategies specifically designed for pharmacies handling {volume_phrase} prescriptions monthly
• Operational efficiency improvements
• Dedicated support for growing pharmacy businesses

Next Steps:
1. We'll prepare a customized proposal based on your specific needs
2. Schedule a detailed consultation to discuss implementation
3. Provide references from similar high-volume pharmacies

Please don't hesitate to reach out if you have any immediate questions.

Best regards,
The {company_name} Sales Team

Phone: 1-800-{company_name.upper()}
Email: sales@{sales_address}.com
Website: www.{sales_address}.com"""

    return FollowUpEmail(subject=subject, body=body)


__all__ = [
    "CallbackScheduler",
    "Mailer",
    "FollowUpEmail",
    "LoggingCallbackScheduler",
    "LoggingMailer",
    "generate_follow_up_email",
]
