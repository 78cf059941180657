"""Best-effort extraction of labeled sections from model output.

Model text is unreliable, so every function here is total: any input,
including None, produces a fully populated result. Sections are found by
boundary scanning; a section ends where the next recognized label begins.
"""

import logging
import re
from typing import Iterable, Mapping, Optional, Sequence, Union

from ..insights.schema import (
    SOURCE_LINK_TITLE,
    Citation,
    GeneratedInsightResult,
    GeneratedNewsletterResult,
)

logger = logging.getLogger(__name__)

NO_SIGNAL = "No signal found."
NO_REFLECTION = "No data fetched for this reflection."
NO_NARRATIVE = "No narrative generated."
DEFAULT_SUBJECT = "Market Intelligence Update"
NO_BODY = "No content generated."

INSIGHT_LABELS = ("SIGNAL", "REFLECTIONS", "NARRATIVE")
NEWSLETTER_LABELS = ("SUBJECT", "BODY")

_INSIGHT_PATTERN = re.compile(r"\b(SIGNAL|REFLECTIONS|NARRATIVE)\s*:", re.IGNORECASE)
_NEWSLETTER_PATTERN = re.compile(r"\b(SUBJECT|BODY)\s*:", re.IGNORECASE)
_QUESTION_PATTERN = re.compile(r"\bQ\s*(\d+)\s*:", re.IGNORECASE)

RawCitation = Union[Citation, Mapping[str, Optional[str]]]


def _scan_sections(
    text: str,
    pattern: re.Pattern,
    open_ended: Iterable[str] = (),
) -> dict[str, str]:
    """Map each label to the text between it and the next label.

    The leftmost occurrence of a label wins. Labels in ``open_ended`` run
    to the end of the text instead.
    """
    open_ended = {label.upper() for label in open_ended}
    matches = list(pattern.finditer(text))
    sections: dict[str, str] = {}

    for index, match in enumerate(matches):
        label = match.group(1).upper()
        if label in sections:
            continue

        if label in open_ended or index + 1 == len(matches):
            end = len(text)
        else:
            end = matches[index + 1].start()
        sections[label] = text[match.end():end].strip()

    return sections


def _scan_reflections(block: str, count: int) -> list[str]:
    """Split a REFLECTIONS block into exactly ``count`` positional answers."""
    matches = list(_QUESTION_PATTERN.finditer(block))
    answers: dict[int, str] = {}

    for index, match in enumerate(matches):
        number = int(match.group(1))
        if number in answers:
            continue
        end = matches[index + 1].start() if index + 1 < len(matches) else len(block)
        answers[number] = block[match.end():end].strip()

    return [answers.get(i) or NO_REFLECTION for i in range(1, count + 1)]


def extract_citations(raw: Optional[Iterable[RawCitation]]) -> list[Citation]:
    """Normalize grounding citations.

    Entries without a uri are dropped, missing titles get a generic label,
    and repeated uris keep their first occurrence.
    """
    citations: list[Citation] = []
    seen: set[str] = set()

    for item in raw or ():
        if isinstance(item, Citation):
            uri, title = item.uri, item.title
        elif isinstance(item, Mapping):
            uri, title = item.get("uri"), item.get("title")
        else:
            continue

        if not isinstance(uri, str):
            continue
        uri = uri.strip()
        if not uri or uri in seen:
            continue
        seen.add(uri)
        title = title.strip() if isinstance(title, str) else ""
        citations.append(Citation(uri=uri, title=title or SOURCE_LINK_TITLE))

    return citations


def extract_insight(
    text: Optional[str],
    questions: Sequence[str],
    citations: Optional[Iterable[RawCitation]] = None,
) -> GeneratedInsightResult:
    """Parse an automated insight response.

    Returns one reflection per question, in question order, whatever the
    model produced.
    """
    text = text or ""
    sections = _scan_sections(text, _INSIGHT_PATTERN, open_ended=("NARRATIVE",))

    missing = [label for label in INSIGHT_LABELS if not sections.get(label)]
    if missing:
        logger.debug(f"[EXTRACTOR] Insight response missing: {', '.join(missing)}")

    return GeneratedInsightResult(
        signal=sections.get("SIGNAL") or NO_SIGNAL,
        reflections=_scan_reflections(sections.get("REFLECTIONS", ""), len(questions)),
        narrative=sections.get("NARRATIVE") or NO_NARRATIVE,
        sources=extract_citations(citations),
    )


def extract_newsletter(
    text: Optional[str],
    citations: Optional[Iterable[RawCitation]] = None,
) -> GeneratedNewsletterResult:
    """Parse an automated newsletter response into subject and body."""
    text = text or ""
    sections = _scan_sections(text, _NEWSLETTER_PATTERN, open_ended=("BODY",))

    missing = [label for label in NEWSLETTER_LABELS if not sections.get(label)]
    if missing:
        logger.debug(f"[EXTRACTOR] Newsletter response missing: {', '.join(missing)}")

    return GeneratedNewsletterResult(
        title=sections.get("SUBJECT") or DEFAULT_SUBJECT,
        content=sections.get("BODY") or NO_BODY,
        sources=extract_citations(citations),
    )
