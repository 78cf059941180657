"""OpenAI client with retry logic using the Responses API."""

import asyncio
import logging
from typing import Any

from openai import (
    APIConnectionError,
    APIError,
    AsyncOpenAI,
    InternalServerError,
    RateLimitError,
)

from ..config import Settings
from ..errors import GenerationError
from ..insights.schema import Citation
from .base import GenerationResult, TextGenerator

logger = logging.getLogger(__name__)

WEB_SEARCH_TOOL = {"type": "web_search"}


def _collect_citations(response: Any) -> list[Citation]:
    """Pull url_citation annotations out of a Responses API result."""
    citations: list[Citation] = []

    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for part in getattr(item, "content", None) or []:
            for annotation in getattr(part, "annotations", None) or []:
                if getattr(annotation, "type", None) != "url_citation":
                    continue
                citations.append(
                    Citation(
                        uri=getattr(annotation, "url", None) or "",
                        title=getattr(annotation, "title", None) or "",
                    )
                )

    return citations


class OpenAIClient(TextGenerator):
    """OpenAI API client using the Responses API with exponential backoff retry."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.request_timeout,
        )
        self.model = settings.openai_model

    async def _call_with_retry(self, prompt: str, use_grounding: bool) -> Any:
        """Make API call with exponential backoff retry."""
        last_error: Exception = RuntimeError("No API call attempted")
        delay = self.settings.retry_base_delay

        prompt_preview = prompt[:100].replace("\n", " ")
        logger.debug(f"[LLM] Prompt ({len(prompt)} chars): {prompt_preview}...")
        logger.debug(f"[LLM] Model: {self.model}, grounding: {use_grounding}")

        request: dict[str, Any] = {"model": self.model, "input": prompt}
        if use_grounding:
            request["tools"] = [WEB_SEARCH_TOOL]

        for attempt in range(self.settings.max_retries):
            try:
                logger.debug(f"[LLM] API call attempt {attempt + 1}/{self.settings.max_retries}")
                response = await self.client.responses.create(**request)
                logger.info(f"[LLM] API call successful on attempt {attempt + 1}")
                return response
            except (RateLimitError, APIConnectionError, InternalServerError) as e:
                last_error = e
                logger.warning(f"[LLM] API error: {e}, retrying in {delay}s (attempt {attempt + 1})")
                await asyncio.sleep(delay)
                delay *= 2
            except APIError as e:
                # Auth, bad request and similar errors will not improve on retry
                logger.error(f"[LLM] Unrecoverable error: {type(e).__name__}: {e}")
                raise GenerationError(f"Generation request rejected: {e}") from e

        logger.error(f"[LLM] All {self.settings.max_retries} attempts failed")
        raise GenerationError(f"Generation failed after {self.settings.max_retries} attempts: {last_error}") from last_error

    async def generate(self, prompt: str, use_grounding: bool = False) -> GenerationResult:
        """Generate text, collecting web citations when grounding is on."""
        response = await self._call_with_retry(prompt, use_grounding)

        text = getattr(response, "output_text", None) or ""
        citations = _collect_citations(response) if use_grounding else []

        response_preview = text[:100].replace("\n", " ")
        logger.debug(f"[LLM] Response ({len(text)} chars, {len(citations)} citation(s)): {response_preview}...")
        return GenerationResult(text=text, citations=citations)
