"""Prompt templates for reply generation, lead extraction and product-question detection."""
from __future__ import annotations

from pharmacy_assistant.core.models import ConversationState, MessageRole
from pharmacy_assistant.core.utils import format_count


def _base_prompt(company_name: str) -> str:
    return f"""You are a professional sales assistant for {company_name}, a company that supports high prescription volume pharmacies. You are handling an inbound call from a pharmacy.

Key guidelines:
- Be professional, friendly, and helpful
- Focus on how {company_name} can support high Rx volume pharmacies
- Ask relevant follow-up questions to understand their needs
- Keep responses concise and conversational
- Always offer follow-up options like email or callback scheduling
"""


def _follow_up_notes(state: ConversationState) -> str:
    notes = [m.content for m in state.transcript if m.role is MessageRole.SYSTEM]
    if not notes:
        return ""
    return "\n\nFollow-up actions already taken:\n" + "\n".join(f"- {note}" for note in notes)


def build_system_prompt(state: ConversationState, company_name: str) -> str:
    """System prompt for the next reply: returning-caller or new-caller variant."""
    base = _base_prompt(company_name)
    profile = state.profile

    if profile is not None:
        volume = format_count(profile.rx_volume)
        details = f"""
CALLER INFORMATION:
- Pharmacy: {profile.name}
- Location: {profile.address or "Unknown"}
- Contact Person: {profile.contact_person}
- Monthly Rx Volume: {volume}
- Email: {profile.email or "Unknown"}

Since this is a returning client, greet them by name and reference their pharmacy details. Emphasize how {company_name} can specifically help with their {volume} monthly prescription volume."""
        return base + details + _follow_up_notes(state)

    prompt = base + f"""
This appears to be a NEW CALLER. Your goals:
1. Warmly greet them and introduce {company_name}
2. Gather basic information: pharmacy name, location, contact person, email, monthly Rx volume
3. Explain how {company_name} specifically helps high-volume pharmacies
4. Offer follow-up via email or callback scheduling
"""
    known = state.pending_fields.to_dict()
    if known:
        details = "\n".join(f"- {key}: {value}" for key, value in known.items())
        prompt += f"\nInformation gathered so far:\n{details}\n"
    if state.collecting_info:
        prompt += "\nYou are currently collecting basic information from this new caller. Ask for one piece of information at a time."
    return prompt + _follow_up_notes(state)


def build_extraction_prompt(utterance: str) -> str:
    return f"""Extract pharmacy information from this message: "{utterance}"

Look for:
- Pharmacy name
- Address/location
- Contact person name
- Email address
- Monthly Rx volume (number of prescriptions)

Return as JSON with only the fields found. Use null for missing fields.
Example: {{"name": "ABC Pharmacy", "address": "123 Main St", "contactPerson": "John Doe", "email": "john@abc.com", "rxVolume": 5000}}"""


def build_product_question_prompt(message: str, company_name: str) -> str:
    return f"""Analyze the following message and determine if the user is asking about "{company_name}" or asking for services/features that {company_name} provides.

Message: "{message}"

Consider these as {company_name} questions:
- Direct questions about {company_name} (any spelling)
- Questions about what {company_name} does, offers, or its services and products
- Questions about services, features, capabilities, tools, or solutions for pharmacy operations
- Questions like "what services do you offer", "what features do you have", "what can you help with"

Do NOT consider these as {company_name} questions:
- General pharmacy-related questions about medications or prescriptions
- Questions about other companies or services
- General conversation not related to services or {company_name}
- Technical support questions about existing systems

Respond with only "true" or "false" (no quotes, no other text)."""


def company_overview(company_name: str) -> str:
    return f"""{company_name} is a comprehensive platform designed to support high-volume pharmacies with their daily operations. We provide innovative solutions to streamline prescription processing, inventory management, and customer service.

Our key services include:
- Advanced prescription management systems
- Inventory optimization tools
- Customer relationship management
- Compliance and reporting solutions
- 24/7 technical support

We specialize in helping pharmacies that process high volumes of prescriptions improve their efficiency and customer satisfaction. Would you like to learn more about how {company_name} can specifically help your pharmacy?"""


__all__ = [
    "build_system_prompt",
    "build_extraction_prompt",
    "build_product_question_prompt",
    "company_overview",
]
