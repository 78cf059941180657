"""Generation orchestration: insight generation, newsletter assembly, slots."""

from .insights import InsightGenerator
from .newsletter import NewsletterAssembler
from .slots import GenerationSlot, SlotState

__all__ = ["GenerationSlot", "InsightGenerator", "NewsletterAssembler", "SlotState"]
