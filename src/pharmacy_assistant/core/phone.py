"""Phone number comparison used for pharmacy lookup."""
from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(raw: str) -> str:
    """
    Strip every character that is not a decimal digit.

    No country-code or extension handling: "+1-555-123-4567" -> "15551234567",
    and "555-123-4567 ext 123" -> "5551234567123".
    """
    return _NON_DIGITS.sub("", raw or "")


def phones_match(a: str, b: str) -> bool:
    """True if the numbers are identical or share the same digit string."""
    if a == b:
        return True
    return normalize_phone(a) == normalize_phone(b)


__all__ = ["normalize_phone", "phones_match"]
