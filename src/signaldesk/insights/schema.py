"""Pydantic models for insights, citations and newsletter drafts."""

import uuid
from datetime import datetime, timezone
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..catalog import NEWSLETTER_TAG, PillarDefinition, PillarId

SOURCE_LINK_TITLE = "Source Link"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Citation(BaseModel):
    """A grounding reference returned alongside generated text."""

    model_config = ConfigDict(frozen=True)

    uri: str
    title: str = SOURCE_LINK_TITLE


class Insight(BaseModel):
    """One saved market observation. Immutable once created."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    pillar_id: PillarId = Field(alias="pillarId")
    date: datetime = Field(default_factory=_utcnow)
    source: str = ""
    signal: str = ""
    journal_answers: dict[str, str] = Field(default_factory=dict, alias="journalAnswers")
    narrative: str = ""
    output_types: list[str] = Field(default_factory=list, alias="outputTypes")

    @field_validator("pillar_id")
    @classmethod
    def _content_pillar_only(cls, value: PillarId) -> PillarId:
        if value is PillarId.NEWSLETTER:
            raise ValueError("The newsletter pillar does not own insights")
        return value

    @field_validator("output_types")
    @classmethod
    def _unique_tags(cls, value: list[str]) -> list[str]:
        seen: list[str] = []
        for tag in value:
            if tag not in seen:
                seen.append(tag)
        return seen

    @classmethod
    def create(
        cls,
        pillar: PillarDefinition,
        *,
        source: str,
        signal: str,
        answers: Optional[Mapping[str, str]] = None,
        narrative: str = "",
        output_types: Optional[list[str]] = None,
    ) -> "Insight":
        """Build a new insight for a pillar, stamping a fresh id and date.

        Answer keys must be questions of the pillar. Blank answers are
        dropped, an absent key meaning "no answer".
        """
        answers = dict(answers or {})
        unknown = [q for q in answers if q not in pillar.questions]
        if unknown:
            raise ValueError(f"Not a question of pillar {pillar.id.value}: {unknown[0]!r}")

        return cls(
            pillar_id=pillar.id,
            source=source,
            signal=signal,
            journal_answers={q: a for q, a in answers.items() if a and a.strip()},
            narrative=narrative,
            output_types=list(output_types or []),
        )

    @property
    def is_newsletter_candidate(self) -> bool:
        return NEWSLETTER_TAG in self.output_types

    def to_record(self) -> dict:
        """Convert to the JSON-serializable storage form."""
        return self.model_dump(mode="json", by_alias=True)


class GeneratedInsightResult(BaseModel):
    """Fields parsed from an automated insight response."""

    signal: str
    reflections: list[str]
    narrative: str
    sources: list[Citation] = Field(default_factory=list)


class GeneratedNewsletterResult(BaseModel):
    """Fields parsed from an automated newsletter response."""

    title: str
    content: str
    sources: list[Citation] = Field(default_factory=list)


class NewsletterDraft(BaseModel):
    """An in-progress newsletter composition. Not persisted."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    content: str = ""
    newsletter_type: Optional[str] = Field(default=None, alias="newsletterType")
    insight_ids: list[str] = Field(default_factory=list, alias="insightIds")
    sources: list[Citation] = Field(default_factory=list)
    date: datetime = Field(default_factory=_utcnow)

    @property
    def filename(self) -> str:
        """Export filename from the date and the title (or the newsletter type)."""
        slug = (self.title or self.newsletter_type or "draft").lower()
        slug = "".join(c if c.isalnum() or c == " " else "" for c in slug)
        slug = "_".join(slug.split()[:6]) or "draft"
        return f"{self.date.strftime('%Y%m%d')}_{slug}.md"

    def to_markdown(self) -> str:
        """Render the draft for export."""
        lines = [f"# {self.title or 'Untitled Draft'}", ""]
        if self.newsletter_type:
            lines += [f"*{self.newsletter_type}* · {self.date.strftime('%b %d, %Y')}", ""]
        lines.append(self.content.strip())

        if self.sources:
            lines += ["", "## Sources", ""]
            lines += [f"- [{s.title}]({s.uri})" for s in self.sources]

        return "\n".join(lines) + "\n"
