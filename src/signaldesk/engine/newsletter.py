"""Newsletter draft assembly.

Two mutually exclusive paths: automated research (grounded, label
extraction, citations kept) and curated synthesis from saved insights
(ungrounded, returned text used verbatim, no citations).
"""

import logging
from typing import Sequence

from ..insights.schema import Insight, NewsletterDraft
from ..insights.store import newsletter_candidates
from ..llm.base import TextGenerator
from ..llm.extractor import extract_newsletter
from ..llm.prompts import build_draft_prompt, build_newsletter_prompt

logger = logging.getLogger(__name__)

DRAFT_FALLBACK = "Failed to generate newsletter draft."


def summarize_insights(insights: Sequence[Insight]) -> str:
    """Summary block fed to the curated-synthesis prompt."""
    return "\n\n".join(
        f"- [{i.pillar_id.value}] Signal: {i.signal}\n  Narrative: {i.narrative}" for i in insights
    )


class NewsletterAssembler:
    """Builds newsletter drafts through the generation service."""

    def __init__(self, generator: TextGenerator):
        self.generator = generator

    @staticmethod
    def eligible_insights(insights: Sequence[Insight]) -> tuple[Insight, ...]:
        """Only insights tagged for newsletter use may be synthesized."""
        return newsletter_candidates(tuple(insights))

    async def generate_automated(self, newsletter_type: str, source: str) -> NewsletterDraft:
        """Research and write a full edition.

        Raises:
            GenerationError: if the service call fails.
        """
        logger.info(f"[NEWSLETTER] Automated '{newsletter_type}' edition from {source}")
        prompt = build_newsletter_prompt(newsletter_type, source)
        result = await self.generator.generate(prompt, use_grounding=True)

        parsed = extract_newsletter(result.text, result.citations)
        return NewsletterDraft(
            title=parsed.title,
            content=parsed.content,
            newsletter_type=newsletter_type,
            insight_ids=[],
            sources=parsed.sources,
        )

    async def draft_from_insights(self, insights: Sequence[Insight]) -> NewsletterDraft:
        """Synthesize an edition from curated insights.

        The title is left for the editor to fill in.

        Raises:
            ValueError: if no insights are given.
            GenerationError: if the service call fails.
        """
        if not insights:
            raise ValueError("At least one insight is required to draft a newsletter")

        logger.info(f"[NEWSLETTER] Drafting from {len(insights)} insight(s)")
        prompt = build_draft_prompt(summarize_insights(insights))
        result = await self.generator.generate(prompt)

        return NewsletterDraft(
            title="",
            content=result.text if result.text.strip() else DRAFT_FALLBACK,
            insight_ids=[i.id for i in insights],
            sources=[],
        )
