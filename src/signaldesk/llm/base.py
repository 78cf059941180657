"""Generation service interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..insights.schema import Citation


@dataclass
class GenerationResult:
    """Raw output of a generation call.

    Citations are passed through as the service returned them; uri or
    title may be empty.
    """

    text: str = ""
    citations: list[Citation] = field(default_factory=list)


class TextGenerator(ABC):
    """Base class for text generation services."""

    @abstractmethod
    async def generate(self, prompt: str, use_grounding: bool = False) -> GenerationResult:
        """Generate text for a prompt, optionally grounded in web search.

        Raises:
            GenerationError: if the service call fails.
        """
        pass
