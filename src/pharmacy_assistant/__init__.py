"""Top-level package for the pharmacy sales-assistant backend."""
from __future__ import annotations

__version__ = "1.0.0"

__all__ = [
    "api",
    "core",
    "llm",
    "services",
]
