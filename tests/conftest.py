"""Shared pytest fixtures for Signal Desk tests."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from signaldesk.catalog import PillarDefinition, PillarId, get_catalog
from signaldesk.config import Settings
from signaldesk.errors import GenerationError
from signaldesk.insights import Citation, Insight, InsightStore, LocalStorage
from signaldesk.llm.base import GenerationResult, TextGenerator


class FakeGenerator(TextGenerator):
    """Generation service returning canned responses in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[tuple[str, bool]] = []

    async def generate(self, prompt: str, use_grounding: bool = False) -> GenerationResult:
        self.calls.append((prompt, use_grounding))
        response = self.responses.pop(0) if self.responses else GenerationResult()
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return GenerationResult(text=response)
        return response


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    """Create a temporary data directory."""
    root = tmp_path / "desk"
    root.mkdir()
    return root


@pytest.fixture
def settings(data_root: Path, monkeypatch) -> Settings:
    """Create settings rooted at a temporary directory."""
    monkeypatch.setenv("OPENAI_API_KEY", "test-api-key")
    return Settings(
        data_root=data_root,
        openai_api_key="test-api-key",
    )


@pytest.fixture
def bitcoin() -> PillarDefinition:
    return get_catalog().get(PillarId.BITCOIN)


@pytest.fixture
def storage(settings: Settings) -> LocalStorage:
    return LocalStorage(settings.data_path)


@pytest.fixture
def store(storage: LocalStorage, settings: Settings) -> InsightStore:
    return InsightStore(storage, settings.storage_key)


@pytest.fixture
def sample_insight(bitcoin: PillarDefinition) -> Insight:
    """A saved Bitcoin insight tagged for the newsletter."""
    return Insight(
        id="11111111-1111-4111-8111-111111111111",
        pillar_id=PillarId.BITCOIN,
        date=datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
        source="Farside",
        signal="ETF inflows turned positive for the third straight day.",
        journal_answers={bitcoin.questions[0]: "Spot bids are front-running the flows."},
        narrative="Institutional demand is absorbing miner supply.",
        output_types=["Newsletter", "Blog Post"],
    )


@pytest.fixture
def archive_insight() -> Insight:
    """A saved Ethereum insight not tagged for the newsletter."""
    return Insight(
        id="22222222-2222-4222-8222-222222222222",
        pillar_id=PillarId.ETHEREUM,
        date=datetime(2024, 1, 16, 9, 30, tzinfo=timezone.utc),
        source="L2Beat",
        signal="L2 fees fell below L1 blob costs.",
        narrative="Value capture is drifting back to L1.",
        output_types=["Journal Archive"],
    )


@pytest.fixture
def insight_response() -> GenerationResult:
    """A well-formed automated insight response with citations."""
    return GenerationResult(
        text=(
            "SIGNAL: ETF flows flipped positive.\n\n"
            "REFLECTIONS:\n"
            "Q1: Flows are leading price by a session.\n"
            "Q2: Long-term holders are accumulating again.\n\n"
            "NARRATIVE: Demand is structural, not speculative."
        ),
        citations=[
            Citation(uri="https://farside.co.uk/btc", title="Farside"),
            Citation(uri="", title="Dropped"),
        ],
    )


@pytest.fixture
def generation_error() -> GenerationError:
    return GenerationError("service unavailable")


@pytest.fixture
def make_generator():
    """Factory for canned-response generators."""
    return FakeGenerator
