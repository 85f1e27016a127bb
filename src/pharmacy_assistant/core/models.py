"""Domain dataclasses: pharmacy profiles, pending lead fields and conversation state."""
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pharmacy_assistant.core.utils import clean_text, utcnow

# Used whenever the record store does not name a contact
DEFAULT_CONTACT_PERSON = "Pharmacy Manager"

# Prescription counts are treated as daily figures and projected to a 30-day month
DAYS_PER_MONTH = 30


@dataclass(frozen=True, slots=True)
class PrescriptionItem:
    """One (drug, count) line of a pharmacy's prescription list."""

    drug: str
    count: int

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "PrescriptionItem":
        if not isinstance(record, Mapping):
            raise TypeError(f"prescription entry must be an object, got {type(record).__name__}")
        return cls(drug=str(record.get("drug", "")), count=int(record.get("count") or 0))

    def to_dict(self) -> Dict[str, Any]:
        return {"drug": self.drug, "count": self.count}


def derive_rx_volume(items: Iterable[PrescriptionItem]) -> int:
    """Monthly volume estimate: sum of daily counts times DAYS_PER_MONTH."""
    return sum(item.count for item in items) * DAYS_PER_MONTH


def _parse_prescriptions(raw: Any) -> List[PrescriptionItem]:
    if not raw:
        return []
    return [PrescriptionItem.from_record(item) for item in raw]


def _join_location(city: Optional[str], state: Optional[str]) -> Optional[str]:
    if city and state:
        return f"{city}, {state}"
    return None


@dataclass
class PharmacyProfile:
    """A pharmacy as known to the record store. Rebuilt on every directory read."""

    id: str
    name: str
    phone: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    rx_volume: int = 0
    contact_person: str = DEFAULT_CONTACT_PERSON
    email: Optional[str] = None
    prescriptions: List[PrescriptionItem] = field(default_factory=list)

    @classmethod
    def from_directory_record(cls, record: Mapping[str, Any]) -> "PharmacyProfile":
        """Transform a listed record: joined location, derived volume, placeholder contact."""
        city = record.get("city")
        state = record.get("state")
        prescriptions = _parse_prescriptions(record.get("prescriptions"))
        return cls(
            id=str(record.get("id", "")),
            name=record.get("name") or "",
            phone=record.get("phone") or "",
            address=_join_location(city, state),
            city=city,
            state=state,
            rx_volume=derive_rx_volume(prescriptions),
            contact_person=DEFAULT_CONTACT_PERSON,
            email=record.get("email"),
            prescriptions=prescriptions,
        )

    @classmethod
    def from_created_record(cls, record: Mapping[str, Any]) -> "PharmacyProfile":
        """
        Parse the record echoed back by a create call.

        Fields submitted by the lead flow (address, contactPerson, rxVolume) are
        taken as echoed; anything missing falls back to the listing rules.
        """
        profile = cls.from_directory_record(record)
        address = clean_text(record.get("address"))
        contact = clean_text(record.get("contactPerson"))
        rx_volume = record.get("rxVolume")
        return replace(
            profile,
            address=address or profile.address,
            contact_person=contact or profile.contact_person,
            rx_volume=int(rx_volume) if rx_volume is not None else profile.rx_volume,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "rxVolume": self.rx_volume,
            "contactPerson": self.contact_person,
            "email": self.email,
            "prescriptions": [item.to_dict() for item in self.prescriptions],
        }


# Wire name for each PartialPharmacyProfile field
_PARTIAL_WIRE_NAMES = {
    "name": "name",
    "address": "address",
    "contact_person": "contactPerson",
    "email": "email",
    "rx_volume": "rxVolume",
}


@dataclass(frozen=True)
class PartialPharmacyProfile:
    """
    Fields gathered from a new lead before a profile exists.

    ``None`` means the field is absent. Instances are immutable; use
    :func:`merge_partial` to combine them.
    """

    name: Optional[str] = None
    address: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    rx_volume: Optional[int] = None

    def present_fields(self) -> List[str]:
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]

    def is_empty(self) -> bool:
        return not self.present_fields()

    def has_mandatory_fields(self) -> bool:
        """Name, contact person and a non-zero volume are required to create a lead."""
        return bool(
            clean_text(self.name)
            and clean_text(self.contact_person)
            and self.rx_volume
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            _PARTIAL_WIRE_NAMES[name]: getattr(self, name)
            for name in self.present_fields()
        }


def merge_partial(
    existing: PartialPharmacyProfile, new: PartialPharmacyProfile
) -> PartialPharmacyProfile:
    """Overwrite each field of ``existing`` that is present in ``new`` (last write wins)."""
    updates = {name: getattr(new, name) for name in new.present_fields()}
    return replace(existing, **updates)


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True)
class ChatMessage:
    role: MessageRole
    content: str
    timestamp: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class ContactInfo:
    """Flattened contact details handed to the callback scheduler and mailer."""

    phone: str
    name: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    rx_volume: Optional[int] = None

    @classmethod
    def from_state(cls, state: "ConversationState") -> "ContactInfo":
        """Prefer the resolved profile, field by field; fall back to what the lead has told us."""
        pending = state.pending_fields
        profile = state.profile

        def pick(name: str) -> Any:
            value = getattr(profile, name) if profile is not None else None
            return value if value else getattr(pending, name)

        return cls(
            phone=state.phone_number,
            name=pick("name"),
            contact_person=pick("contact_person"),
            email=pick("email"),
            address=pick("address"),
            rx_volume=pick("rx_volume"),
        )


@dataclass
class ConversationState:
    """Everything known about one caller's session, keyed by phone number."""

    phone_number: str
    profile: Optional[PharmacyProfile] = None
    is_new_lead: bool = True
    collecting_info: bool = False
    pending_fields: PartialPharmacyProfile = field(default_factory=PartialPharmacyProfile)
    transcript: List[ChatMessage] = field(default_factory=list)

    @classmethod
    def for_known(cls, phone_number: str, profile: PharmacyProfile) -> "ConversationState":
        return cls(phone_number=phone_number, profile=profile, is_new_lead=False, collecting_info=False)

    @classmethod
    def for_new_lead(cls, phone_number: str) -> "ConversationState":
        return cls(phone_number=phone_number, is_new_lead=True, collecting_info=True)

    def append(self, role: MessageRole, content: str) -> ChatMessage:
        message = ChatMessage(role=role, content=content)
        self.transcript.append(message)
        return message

    def last_user_message(self) -> Optional[str]:
        for message in reversed(self.transcript):
            if message.role is MessageRole.USER:
                return message.content
        return None

    def attach_profile(self, profile: PharmacyProfile) -> None:
        self.profile = profile
        self.is_new_lead = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phoneNumber": self.phone_number,
            "pharmacy": self.profile.to_dict() if self.profile else None,
            "isNewLead": self.is_new_lead,
            "collectingInfo": self.collecting_info,
            "pendingInfo": self.pending_fields.to_dict(),
            "conversation": [message.to_dict() for message in self.transcript],
        }


__all__ = [
    "DEFAULT_CONTACT_PERSON",
    "DAYS_PER_MONTH",
    "PrescriptionItem",
    "derive_rx_volume",
    "PharmacyProfile",
    "PartialPharmacyProfile",
    "merge_partial",
    "MessageRole",
    "ChatMessage",
    "ContactInfo",
    "ConversationState",
]
