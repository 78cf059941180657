"""Tests for signaldesk.llm.openai module."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from openai import APIConnectionError, AuthenticationError, RateLimitError

from signaldesk.errors import GenerationError
from signaldesk.insights.schema import Citation
from signaldesk.llm.openai import WEB_SEARCH_TOOL, OpenAIClient


def create_mock_response(text: str = "response text", annotations=None):
    """Create a mock Responses API result with one message output."""
    part = MagicMock(type="output_text", text=text, annotations=annotations or [])
    message = MagicMock(type="message", content=[part])
    search_call = MagicMock(type="web_search_call")

    mock = MagicMock()
    mock.output_text = text
    mock.output = [search_call, message]
    return mock


def url_citation(url, title):
    return MagicMock(type="url_citation", url=url, title=title)


def rate_limit_error():
    return RateLimitError(
        message="Rate limit",
        response=MagicMock(status_code=429),
        body={"error": {"message": "Rate limit"}},
    )


class TestOpenAIClient:
    """Tests for OpenAIClient class."""

    @pytest.fixture
    def mock_openai(self):
        """Create mock OpenAI client."""
        mock = MagicMock()
        mock.responses = MagicMock()
        mock.responses.create = AsyncMock()
        return mock

    @pytest.fixture
    def client(self, settings, mock_openai):
        """Create OpenAIClient with mocked dependencies."""
        with patch("signaldesk.llm.openai.AsyncOpenAI", return_value=mock_openai):
            client = OpenAIClient(settings)
            client.client = mock_openai
            return client

    def test_init(self, settings):
        """Test client initialization."""
        with patch("signaldesk.llm.openai.AsyncOpenAI") as mock_class:
            client = OpenAIClient(settings)

            mock_class.assert_called_once_with(
                api_key=settings.openai_api_key,
                timeout=settings.request_timeout,
            )
            assert client.model == settings.openai_model

    async def test_generate_without_grounding(self, client, mock_openai):
        """Test a plain call sends no tools and returns no citations."""
        mock_openai.responses.create.return_value = create_mock_response(
            "Narrative text", annotations=[url_citation("https://ignored", "Ignored")]
        )

        result = await client.generate("prompt")

        assert result.text == "Narrative text"
        assert result.citations == []
        kwargs = mock_openai.responses.create.call_args.kwargs
        assert kwargs["model"] == client.model
        assert kwargs["input"] == "prompt"
        assert "tools" not in kwargs

    async def test_generate_with_grounding_collects_citations(self, client, mock_openai):
        """Test grounding enables web search and keeps raw citations."""
        mock_openai.responses.create.return_value = create_mock_response(
            "SIGNAL: x",
            annotations=[
                url_citation("https://glassnode.com/insights", "Glassnode Insights"),
                url_citation("", None),
                MagicMock(type="file_citation"),
            ],
        )

        result = await client.generate("prompt", use_grounding=True)

        assert mock_openai.responses.create.call_args.kwargs["tools"] == [WEB_SEARCH_TOOL]
        assert result.citations == [
            Citation(uri="https://glassnode.com/insights", title="Glassnode Insights"),
            Citation(uri="", title=""),
        ]

    async def test_generate_handles_missing_output_text(self, client, mock_openai):
        response = create_mock_response()
        response.output_text = None
        mock_openai.responses.create.return_value = response

        result = await client.generate("prompt")

        assert result.text == ""

    async def test_retries_on_rate_limit(self, client, mock_openai):
        """Test that rate limit errors trigger retry."""
        mock_openai.responses.create.side_effect = [rate_limit_error(), create_mock_response("ok")]

        with patch("asyncio.sleep", new_callable=AsyncMock):
            result = await client.generate("prompt")

        assert result.text == "ok"
        assert mock_openai.responses.create.call_count == 2

    async def test_exponential_backoff(self, client, mock_openai):
        """Test exponential backoff on retries."""
        mock_openai.responses.create.side_effect = rate_limit_error()

        sleep_calls = []

        async def mock_sleep(delay):
            sleep_calls.append(delay)

        client.settings.max_retries = 3
        with patch("asyncio.sleep", mock_sleep):
            with pytest.raises(GenerationError) as exc_info:
                await client.generate("prompt")

        assert sleep_calls == [1.0, 2.0, 4.0]
        assert isinstance(exc_info.value.__cause__, RateLimitError)

    async def test_gives_up_after_max_retries(self, client, mock_openai):
        """Test that client gives up after max retries."""
        mock_openai.responses.create.side_effect = APIConnectionError(request=MagicMock())

        client.settings.max_retries = 2
        with patch("asyncio.sleep", new_callable=AsyncMock):
            with pytest.raises(GenerationError):
                await client.generate("prompt")

        assert mock_openai.responses.create.call_count == 2

    async def test_auth_error_not_retried(self, client, mock_openai):
        """Test non-retryable API errors fail immediately."""
        mock_openai.responses.create.side_effect = AuthenticationError(
            message="Invalid key",
            response=MagicMock(status_code=401),
            body={"error": {"message": "Invalid key"}},
        )

        with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            with pytest.raises(GenerationError, match="rejected"):
                await client.generate("prompt")

        mock_sleep.assert_not_called()
        assert mock_openai.responses.create.call_count == 1
