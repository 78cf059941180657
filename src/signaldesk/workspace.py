"""Editable insight and newsletter drafts.

These hold what the analyst is working on before it is saved or exported,
and route generation requests through slots so a failed or duplicate
request never disturbs the fields already filled in.
"""

import logging
from pathlib import Path

from .catalog import NEWSLETTER_TYPES, SOURCES, PillarDefinition
from .engine import GenerationSlot, InsightGenerator, NewsletterAssembler
from .insights import Citation, Insight, InsightCollection, InsightStore, NewsletterDraft
from .llm.base import TextGenerator

logger = logging.getLogger(__name__)


class InsightWorkspace:
    """Draft of one insight for a pillar."""

    def __init__(self, pillar: PillarDefinition, generator: TextGenerator, store: InsightStore):
        if not pillar.is_content:
            raise ValueError("Insights can only be drafted for content pillars")
        self.pillar = pillar
        self.generator = InsightGenerator(generator)
        self.store = store
        self.source = SOURCES[0]
        self.automate_slot = GenerationSlot(
            "insight", "Intelligence fetch failed. Please check your connection or API key."
        )
        self.synthesis_slot = GenerationSlot("narrative", "Error generating AI synthesis. Please try again.")
        self.reset()

    def reset(self) -> None:
        """Clear the form, keeping the selected source."""
        self.signal = ""
        self.answers: dict[str, str] = {}
        self.narrative = ""
        self.output_types: list[str] = []
        self.sources: list[Citation] = []

    def switch_pillar(self, pillar: PillarDefinition) -> None:
        if not pillar.is_content:
            raise ValueError("Insights can only be drafted for content pillars")
        self.pillar = pillar
        self.reset()

    def set_answer(self, question: str, answer: str) -> None:
        if question not in self.pillar.questions:
            raise ValueError(f"Not a question of pillar {self.pillar.id.value}: {question!r}")
        self.answers[question] = answer

    def toggle_output_type(self, tag: str) -> None:
        if tag in self.output_types:
            self.output_types.remove(tag)
        else:
            self.output_types.append(tag)

    @property
    def can_save(self) -> bool:
        return bool(self.signal.strip() and self.narrative.strip())

    async def automate(self) -> bool:
        """Fill every field from automated research.

        Returns True if the fields were populated. On failure the fields
        are left as they were and ``automate_slot.notice`` says why.
        """
        result = await self.automate_slot.run(lambda: self.generator.generate(self.pillar, self.source))
        if result is None:
            return False

        self.signal = result.signal
        self.narrative = result.narrative
        self.sources = list(result.sources)
        self.answers = dict(zip(self.pillar.questions, result.reflections))
        return True

    async def synthesize(self) -> bool:
        """Replace the narrative with one synthesized from signal and answers."""
        if not self.signal.strip():
            return False

        answers = [a for a in self.answers.values() if a]
        narrative = await self.synthesis_slot.run(
            lambda: self.generator.synthesize_narrative(self.signal, answers)
        )
        if narrative is None:
            return False

        self.narrative = narrative
        return True

    def save(self) -> Insight:
        """Save the draft as a new insight and clear the form.

        Raises:
            ValueError: the draft has no signal or no narrative yet.
            PersistenceError: the insight is in the store's memory but was
                not durably written. The form is cleared regardless.
        """
        if not self.can_save:
            raise ValueError("An insight needs both a signal and a narrative before it can be saved")

        insight = Insight.create(
            self.pillar,
            source=self.source,
            signal=self.signal,
            answers=self.answers,
            narrative=self.narrative,
            output_types=self.output_types,
        )
        try:
            self.store.save(insight)
        finally:
            self.reset()
        logger.info(f"[WORKSPACE] Insight saved to archive: {insight.id}")
        return insight


class NewsletterWorkspace:
    """Draft of one newsletter edition."""

    def __init__(self, generator: TextGenerator, store: InsightStore):
        self.assembler = NewsletterAssembler(generator)
        self.store = store
        self.newsletter_type = NEWSLETTER_TYPES[0]
        self.target_source = SOURCES[0]
        self.selected_ids: list[str] = []
        self.title = ""
        self.content = ""
        self.sources: list[Citation] = []
        self._insight_ids: list[str] = []
        self.automate_slot = GenerationSlot(
            "newsletter", "Failed to auto-generate newsletter. Check API key or connection."
        )
        self.draft_slot = GenerationSlot("newsletter-draft", "Error generating newsletter draft.")

    def candidates(self) -> InsightCollection:
        """Saved insights that may be selected for synthesis."""
        return self.assembler.eligible_insights(self.store.insights)

    def toggle_insight(self, insight_id: str) -> None:
        if insight_id in self.selected_ids:
            self.selected_ids.remove(insight_id)
        elif any(i.id == insight_id for i in self.candidates()):
            self.selected_ids.append(insight_id)
        else:
            logger.debug(f"[WORKSPACE] Ignoring non-candidate insight {insight_id}")

    def selected(self) -> list[Insight]:
        return [i for i in self.candidates() if i.id in self.selected_ids]

    def _apply(self, draft: NewsletterDraft, keep_title: bool = False) -> None:
        if not keep_title:
            self.title = draft.title
        self.content = draft.content
        self.sources = list(draft.sources)
        self._insight_ids = list(draft.insight_ids)

    async def automate(self) -> bool:
        """Research and write a full edition into the draft."""
        draft = await self.automate_slot.run(
            lambda: self.assembler.generate_automated(self.newsletter_type, self.target_source)
        )
        if draft is None:
            return False
        self._apply(draft)
        return True

    async def draft_from_selected(self) -> bool:
        """Synthesize the draft body from the selected insights.

        The title is the editor's and is kept as is.
        """
        selected = self.selected()
        if not selected:
            return False

        draft = await self.draft_slot.run(lambda: self.assembler.draft_from_insights(selected))
        if draft is None:
            return False
        self._apply(draft, keep_title=True)
        return True

    def draft(self) -> NewsletterDraft:
        """Snapshot of the current draft."""
        return NewsletterDraft(
            title=self.title,
            content=self.content,
            newsletter_type=self.newsletter_type,
            insight_ids=list(self._insight_ids),
            sources=list(self.sources),
        )

    def export(self, path: Path) -> Path:
        """Write the draft as markdown."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.draft().to_markdown(), encoding="utf-8")
        logger.info(f"[NEWSLETTER] Exported draft to {path}")
        return path

