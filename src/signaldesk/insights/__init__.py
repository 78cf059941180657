"""Insight records, local storage and the insight store."""

from .schema import (
    Citation,
    GeneratedInsightResult,
    GeneratedNewsletterResult,
    Insight,
    NewsletterDraft,
)
from .storage import LocalStorage
from .store import InsightCollection, InsightStore, append_insight, newsletter_candidates

__all__ = [
    "Citation",
    "GeneratedInsightResult",
    "GeneratedNewsletterResult",
    "Insight",
    "InsightCollection",
    "InsightStore",
    "LocalStorage",
    "NewsletterDraft",
    "append_insight",
    "newsletter_candidates",
]
