"""Tests for follow-up e-mail content and the logging collaborators."""
from __future__ import annotations

from pharmacy_assistant.core.models import ContactInfo
from pharmacy_assistant.services.followup import (
    LoggingCallbackScheduler,
    LoggingMailer,
    generate_follow_up_email,
)

CONTACT = ContactInfo(
    phone="555",
    name="Sunrise Pharmacy",
    contact_person="Dana Lee",
    email="dana@sunrise.com",
    address="Austin, TX",
    rx_volume=12000,
)


def test_email_template_with_known_details():
    email = generate_follow_up_email(CONTACT)

    assert email.subject == "Follow-up: Pharmesol Solutions for Sunrise Pharmacy"
    assert email.body.startswith("Dear Dana Lee,")
    assert "Your current monthly prescription volume: 12,000" in email.body
    assert "Location: Austin, TX" in email.body
    assert "handling 12,000+ prescriptions monthly" in email.body
    assert "sales@pharmesol.com" in email.body


def test_email_template_with_unknown_details():
    contact = ContactInfo(phone="555", name="Sunrise Pharmacy", email="dana@sunrise.com")
    body = generate_follow_up_email(contact).body

    assert "Your current monthly prescription volume: To be determined" in body
    assert "Location: To be confirmed" in body
    assert "handling high volumes of prescriptions monthly" in body


def test_company_name_in_template():
    email = generate_follow_up_email(CONTACT, company_name="Acme Rx")
    assert email.subject == "Follow-up: Acme Rx Solutions for Sunrise Pharmacy"
    assert "The Acme Rx Sales Team" in email.body


def test_logging_scheduler_reports_success(caplog):
    with caplog.at_level("INFO"):
        assert LoggingCallbackScheduler().schedule(CONTACT, "Friday 10am", "pricing") is True
    assert "Preferred time: Friday 10am" in caplog.text


def test_logging_mailer_reports_success(caplog):
    with caplog.at_level("INFO"):
        assert LoggingMailer().send(CONTACT, "Subject", "Body") is True
    assert "dana@sunrise.com" in caplog.text
