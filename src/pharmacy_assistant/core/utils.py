"""Small shared helpers."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Get current UTC datetime with timezone info. Always use this instead of datetime.now()."""
    return datetime.now(timezone.utc)


def clean_text(value: object) -> Optional[str]:
    """Strip a string value, mapping None, non-strings and blanks to None."""
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def format_count(value: int) -> str:
    """Render a count with thousands separators (8400 -> '8,400')."""
    return f"{value:,}"
