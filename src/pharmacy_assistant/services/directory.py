"""Pharmacy record store accessor (REST collection over httpx)."""
from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, Type

import httpx

from pharmacy_assistant.core.config import get_settings
from pharmacy_assistant.core.exceptions import (
    CreateFailure,
    DirectoryError,
    FetchFailure,
    LookupFailure,
)
from pharmacy_assistant.core.logging_config import get_logger, log_external_call
from pharmacy_assistant.core.models import PartialPharmacyProfile, PharmacyProfile
from pharmacy_assistant.core.phone import phones_match
from pharmacy_assistant.core.utils import format_count

LOGGER = get_logger(__name__)

SERVICE_NAME = "pharmacy_directory"

# Inclusive lower bounds, highest first
HIGH_VOLUME_THRESHOLD = 10000
ELEVATED_VOLUME_THRESHOLD = 5000
MEDIUM_VOLUME_THRESHOLD = 1000


def rx_volume_message(rx_volume: int, company_name: str = "Pharmesol") -> str:
    """Pick the sales sentence for a monthly prescription volume."""
    volume = format_count(rx_volume)
    if rx_volume >= HIGH_VOLUME_THRESHOLD:
        return (
            f"With your high prescription volume of {volume} Rx per month, {company_name} can provide "
            "significant cost savings and operational efficiency improvements."
        )
    if rx_volume >= ELEVATED_VOLUME_THRESHOLD:
        return (
            f"Your pharmacy's volume of {volume} Rx per month puts you in an excellent position "
            "to benefit from our specialized high-volume services."
        )
    if rx_volume >= MEDIUM_VOLUME_THRESHOLD:
        return f"With {volume} Rx per month, we can help optimize your operations and prepare for future growth."
    return (
        f"We understand the challenges of managing {volume} prescriptions monthly, "
        "and we can help streamline your processes."
    )


class PharmacyDirectory:
    """
    Read-through access to the external pharmacy records.

    Nothing is cached: every lookup fetches the full record set and builds
    fresh profiles from it.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ):
        settings = get_settings()
        self.api_url = api_url or settings.pharmacy_api_url
        self.timeout = timeout or settings.pharmacy_api_timeout
        self.company_name = settings.company_name
        self._client = client

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _fetch_records(self, operation: str, failure: Type[DirectoryError]) -> List[Dict[str, Any]]:
        started = time.perf_counter()
        try:
            response = self._get_client().get(self.api_url)
            response.raise_for_status()
            records = response.json()
            if not isinstance(records, list):
                raise ValueError(f"expected a list of records, got {type(records).__name__}")
            if not all(isinstance(record, dict) for record in records):
                raise ValueError("record list contains non-object entries")
        except (httpx.HTTPError, ValueError) as exc:
            log_external_call(LOGGER, SERVICE_NAME, operation, False, (time.perf_counter() - started) * 1000)
            raise failure(f"Failed to fetch pharmacy records: {exc}") from exc

        log_external_call(
            LOGGER,
            SERVICE_NAME,
            operation,
            True,
            (time.perf_counter() - started) * 1000,
            records=len(records),
        )
        return records

    def find_by_phone(self, phone: str) -> Optional[PharmacyProfile]:
        """
        Resolve a caller's number to a profile; first match in store order wins.

        Returns:
            The matching profile, or None when no record matches.

        Raises:
            LookupFailure: if the record store cannot be read.
        """
        LOGGER.info(f"Looking up pharmacy with phone: {phone}")
        records = self._fetch_records("find_by_phone", LookupFailure)

        for record in records:
            if phones_match(str(record.get("phone") or ""), phone):
                try:
                    profile = PharmacyProfile.from_directory_record(record)
                except (TypeError, ValueError, AttributeError) as exc:
                    raise LookupFailure(f"Unreadable pharmacy record: {exc}") from exc
                LOGGER.info(f"Found pharmacy: {profile.name}")
                return profile

        LOGGER.info(f"No pharmacy found for phone: {phone}")
        return None

    def list_all(self) -> List[PharmacyProfile]:
        """
        Fetch and transform every record.

        Raises:
            FetchFailure: if the record store cannot be read.
        """
        records = self._fetch_records("list_all", FetchFailure)
        try:
            return [PharmacyProfile.from_directory_record(record) for record in records]
        except (TypeError, ValueError, AttributeError) as exc:
            raise FetchFailure(f"Unreadable pharmacy record: {exc}") from exc

    def create(self, partial: PartialPharmacyProfile, phone: str) -> PharmacyProfile:
        """
        Submit a new record and return what the store echoes back.

        Raises:
            CreateFailure: on transport errors or an unreadable echo.
        """
        payload = {**partial.to_dict(), "phone": phone}
        LOGGER.info(f"Creating new pharmacy: {partial.name}")

        started = time.perf_counter()
        try:
            response = self._get_client().post(self.api_url, json=payload)
            response.raise_for_status()
            created = PharmacyProfile.from_created_record(response.json())
        except (httpx.HTTPError, TypeError, ValueError, AttributeError) as exc:
            log_external_call(LOGGER, SERVICE_NAME, "create", False, (time.perf_counter() - started) * 1000)
            raise CreateFailure(f"Failed to create pharmacy: {exc}") from exc

        log_external_call(LOGGER, SERVICE_NAME, "create", True, (time.perf_counter() - started) * 1000, id=created.id)
        return created

    def rx_volume_message(self, rx_volume: int) -> str:
        return rx_volume_message(rx_volume, self.company_name)


_directory: Optional[PharmacyDirectory] = None


def get_pharmacy_directory() -> PharmacyDirectory:
    """Get or create the process-wide directory."""
    global _directory
    if _directory is None:
        _directory = PharmacyDirectory()
    return _directory


__all__ = [
    "PharmacyDirectory",
    "get_pharmacy_directory",
    "rx_volume_message",
    "HIGH_VOLUME_THRESHOLD",
    "ELEVATED_VOLUME_THRESHOLD",
    "MEDIUM_VOLUME_THRESHOLD",
]
