"""LLM helpers for lead extraction and reply generation."""
from .client import LLMClient, get_llm_client, reset_llm_client
from .extraction import LeadExtractionEngine, parse_extraction
from .replies import ProductInfoResponder, ReplyGenerator

__all__ = [
    "LLMClient",
    "get_llm_client",
    "reset_llm_client",
    "LeadExtractionEngine",
    "parse_extraction",
    "ProductInfoResponder",
    "ReplyGenerator",
]
