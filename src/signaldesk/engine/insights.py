"""Automated insight generation and narrative synthesis."""

import logging
from typing import Iterable

from ..catalog import PillarDefinition
from ..insights.schema import GeneratedInsightResult
from ..llm.base import TextGenerator
from ..llm.extractor import extract_insight
from ..llm.prompts import build_insight_prompt, build_narrative_prompt

logger = logging.getLogger(__name__)

NARRATIVE_FALLBACK = "Failed to generate narrative."


class InsightGenerator:
    """Fills insight drafts from the generation service."""

    def __init__(self, generator: TextGenerator):
        self.generator = generator

    async def generate(self, pillar: PillarDefinition, source: str) -> GeneratedInsightResult:
        """Research a pillar with web grounding and parse the labeled response.

        Raises:
            GenerationError: if the service call fails.
        """
        logger.info(f"[LLM] Generating insight for '{pillar.name}' from {source}")
        prompt = build_insight_prompt(pillar.name, source, pillar.questions)
        result = await self.generator.generate(prompt, use_grounding=True)

        insight = extract_insight(result.text, pillar.questions, result.citations)
        logger.info(f"[LLM] Insight generated with {len(insight.sources)} source(s)")
        return insight

    async def synthesize_narrative(self, signal: str, answers: Iterable[str]) -> str:
        """Write a narrative interpretation from a signal and reflection answers."""
        prompt = build_narrative_prompt(signal, answers)
        result = await self.generator.generate(prompt)
        return result.text.strip() or NARRATIVE_FALLBACK
