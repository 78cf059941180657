"""Generation client, prompts and response extraction."""

from .base import GenerationResult, TextGenerator
from .extractor import extract_citations, extract_insight, extract_newsletter
from .openai import OpenAIClient

__all__ = [
    "GenerationResult",
    "OpenAIClient",
    "TextGenerator",
    "extract_citations",
    "extract_insight",
    "extract_newsletter",
]
