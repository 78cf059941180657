"""Prompt templates for market intelligence generation.

The labeled-section headers (SIGNAL:, REFLECTIONS:, Q1:..., NARRATIVE:,
SUBJECT:, BODY:) must match what ``extractor`` looks for.
"""

from typing import Iterable, Sequence

AUTOMATED_INSIGHT_PROMPT = """Search for the most recent and relevant crypto market intelligence for the pillar: "{pillar_name}".
Focus specifically on information likely found on or related to: "{source_name}".

Return a detailed analysis in the following format (do not use JSON, just plain text with these headers):

SIGNAL: [A concise 1-2 sentence summary of the primary market signal found]

REFLECTIONS:
{reflections}

NARRATIVE: [A deep-dive editorial interpretation of this data, focusing on market psychology and structural implications]"""

AUTOMATED_NEWSLETTER_PROMPT = """Perform a deep search for the latest crypto news and on-chain trends suitable for a "{newsletter_type}" newsletter.
Focus on data and insights from or related to: "{source_name}".

Write a complete newsletter edition.

Format your response exactly as follows:
SUBJECT: [A high-impact, clickable subject line]
BODY: [A 300-500 word professional editorial. Include an introduction, 3-4 key data-driven points, and a closing 'Analyst Outlook' section.]"""

NARRATIVE_SYNTHESIS_PROMPT = """You are a professional Crypto Market Analyst.
Input Signal: {signal}
Contextual Reflections: {reflections}

Task: Based on the raw signal and my reflections, synthesize a professional, deep-dive narrative interpretation.
Focus on market psychology, liquidity movements, and structural implications. Avoid hype."""

NEWSLETTER_DRAFT_PROMPT = """You are an elite crypto newsletter writer.
Draft a cohesive, editorial-style newsletter based on these insights:

{summary}

Guidelines:
- Use a serious, research-focused tone.
- Start with a compelling hook.
- Group insights logically.
- Focus on 'why' it matters, not just 'what' happened.
- Max 500 words."""


def build_insight_prompt(pillar_name: str, source_name: str, questions: Sequence[str]) -> str:
    reflections = "\n".join(
        f"Q{i}: [Detailed answer to: {question}]" for i, question in enumerate(questions, start=1)
    )
    return AUTOMATED_INSIGHT_PROMPT.format(
        pillar_name=pillar_name,
        source_name=source_name,
        reflections=reflections,
    )


def build_newsletter_prompt(newsletter_type: str, source_name: str) -> str:
    return AUTOMATED_NEWSLETTER_PROMPT.format(
        newsletter_type=newsletter_type,
        source_name=source_name,
    )


def build_narrative_prompt(signal: str, answers: Iterable[str]) -> str:
    return NARRATIVE_SYNTHESIS_PROMPT.format(
        signal=signal,
        reflections=" | ".join(answers),
    )


def build_draft_prompt(summary: str) -> str:
    return NEWSLETTER_DRAFT_PROMPT.format(summary=summary)
