"""Tests for lead field extraction."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from pharmacy_assistant.core.exceptions import ExtractionFailure, LLMTimeoutError
from pharmacy_assistant.core.models import PartialPharmacyProfile
from pharmacy_assistant.core.results import Err, Ok
from pharmacy_assistant.llm.extraction import LeadExtractionEngine, parse_extraction


def engine_returning(raw=None, error=None) -> LeadExtractionEngine:
    client = MagicMock()
    if error is not None:
        client.generate_completion.side_effect = error
    else:
        client.generate_completion.return_value = raw
    return LeadExtractionEngine(client=client)


class TestParseExtraction:
    def test_full_object(self):
        partial = parse_extraction(
            '{"name": "ABC Pharmacy", "address": "123 Main St", "contactPerson": "John Doe", '
            '"email": "john@abc.com", "rxVolume": 5000}'
        )
        assert partial == PartialPharmacyProfile(
            name="ABC Pharmacy",
            address="123 Main St",
            contact_person="John Doe",
            email="john@abc.com",
            rx_volume=5000,
        )

    def test_nulls_and_blanks_are_absent(self):
        partial = parse_extraction('{"name": "ABC Pharmacy", "email": null, "address": "  "}')
        assert partial.present_fields() == ["name"]

    def test_object_embedded_in_prose(self):
        partial = parse_extraction('Sure! Here you go: {"contactPerson": "Jane"} Hope that helps.')
        assert partial.contact_person == "Jane"

    def test_unknown_keys_are_ignored(self):
        partial = parse_extraction('{"name": "ABC", "fax": "555-0000"}')
        assert partial.to_dict() == {"name": "ABC"}

    def test_numeric_string_volume_is_coerced(self):
        assert parse_extraction('{"rxVolume": "6000"}').rx_volume == 6000

    @pytest.mark.parametrize(
        "raw",
        [
            "no json here",
            '{"name": "ABC",',
            '{"rxVolume": -5}',
            '{"rxVolume": "lots"}',
        ],
    )
    def test_invalid_responses_raise(self, raw):
        with pytest.raises(ExtractionFailure):
            parse_extraction(raw)


class TestLeadExtractionEngine:
    def test_valid_response_is_ok(self):
        outcome = engine_returning('{"name": "Sunrise Pharmacy"}').try_extract("We're Sunrise Pharmacy")
        assert isinstance(outcome, Ok)
        assert outcome.value.name == "Sunrise Pharmacy"

    def test_malformed_response_is_err(self):
        outcome = engine_returning("{not json}").try_extract("hello")
        assert isinstance(outcome, Err)
        assert isinstance(outcome.error, ExtractionFailure)

    def test_llm_error_is_err(self):
        outcome = engine_returning(error=LLMTimeoutError("slow")).try_extract("hello")
        assert isinstance(outcome, Err)

    def test_empty_completion_is_empty_partial(self):
        outcome = engine_returning("").try_extract("hello")
        assert isinstance(outcome, Ok)
        assert outcome.value.is_empty()

    def test_extract_degrades_to_empty(self):
        partial = engine_returning("garbage").extract("hello")
        assert partial == PartialPharmacyProfile()

    def test_prompt_contains_utterance(self):
        engine = engine_returning("{}")
        engine.try_extract("Call me Dana")
        prompt = engine.client.generate_completion.call_args.args[0]
        assert '"Call me Dana"' in prompt
