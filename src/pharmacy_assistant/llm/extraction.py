"""Turn one free-text utterance into a partial pharmacy record."""
from __future__ import annotations

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pharmacy_assistant.core.config import Settings, get_settings
from pharmacy_assistant.core.exceptions import ExtractionFailure
from pharmacy_assistant.core.logging_config import get_logger
from pharmacy_assistant.core.models import PartialPharmacyProfile
from pharmacy_assistant.core.results import Err, Ok, Result
from pharmacy_assistant.llm.client import LLMClient, get_llm_client
from pharmacy_assistant.llm.prompts import build_extraction_prompt

LOGGER = get_logger(__name__)


class ExtractedFields(BaseModel):
    """Shape the extraction model is asked to return. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: Optional[str] = None
    address: Optional[str] = None
    contact_person: Optional[str] = Field(default=None, alias="contactPerson")
    email: Optional[str] = None
    rx_volume: Optional[int] = Field(default=None, alias="rxVolume", ge=0)

    @field_validator("name", "address", "contact_person", "email", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip() or None
        return v

    def to_partial(self) -> PartialPharmacyProfile:
        return PartialPharmacyProfile(
            name=self.name,
            address=self.address,
            contact_person=self.contact_person,
            email=self.email,
            rx_volume=self.rx_volume,
        )


def parse_extraction(raw: str) -> PartialPharmacyProfile:
    """
    Parse a model completion into a partial record.

    Raises:
        ExtractionFailure: if no JSON object is found or it does not validate.
            Nothing is applied from an invalid response.
    """
    start = raw.find("{")
    end = raw.rfind("}") + 1
    if start < 0 or end <= start:
        raise ExtractionFailure("No JSON object in extraction response")

    try:
        data: Dict[str, Any] = json.loads(raw[start:end])
    except json.JSONDecodeError as exc:
        raise ExtractionFailure(f"Malformed extraction JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ExtractionFailure("Extraction response is not an object")

    try:
        return ExtractedFields.model_validate(data).to_partial()
    except ValidationError as exc:
        raise ExtractionFailure(f"Extraction response failed validation: {exc}") from exc


class LeadExtractionEngine:
    """Asks the LLM for the fields it can recognise in a caller's message."""

    def __init__(self, client: Optional[LLMClient] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.client = client or get_llm_client()

    def try_extract(self, utterance: str) -> Result:
        """Return ``Ok(partial)`` or ``Err(ExtractionFailure)``; never raises."""
        try:
            raw = self.client.generate_completion(
                build_extraction_prompt(utterance),
                temperature=self.settings.extraction_temperature,
                max_tokens=self.settings.extraction_max_tokens,
                fast=True,
            )
        except Exception as exc:
            return Err(ExtractionFailure(f"Extraction call failed: {exc}"))

        if not raw:
            return Ok(PartialPharmacyProfile())

        try:
            return Ok(parse_extraction(raw))
        except ExtractionFailure as exc:
            return Err(exc)

    def extract(self, utterance: str) -> PartialPharmacyProfile:
        """Best-effort extraction; any failure yields an empty partial record."""
        outcome = self.try_extract(utterance)
        if isinstance(outcome, Err):
            LOGGER.warning(f"Extraction failed, no fields applied: {outcome.error}")
        return outcome.unwrap_or(PartialPharmacyProfile())


__all__ = ["ExtractedFields", "parse_extraction", "LeadExtractionEngine"]
