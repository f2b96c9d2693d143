# tests/test_llm.py
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from reporter.exceptions import AnalysisError
from reporter.models.bug_report import BugAnalysis
from reporter.models.conversation import Message
from reporter.services.llm import LLMService, parse_llm_response

VALID_RESPONSE = json.dumps({
    "title": "Login fails",
    "description": "...",
    "stepsToReproduce": ["Open app", "Tap login"],
    "severity": "high",
})

MESSAGES = [
    Message(type="text", from_="user", content="I can't log in"),
    Message(type="event", from_="operator", content={"namespace": "state:resolved"}),
]


def _anthropic_response(text: str, block_type: str = "text") -> MagicMock:
    response = MagicMock()
    block = MagicMock()
    block.type = block_type
    block.text = text
    response.content = [block]
    return response


def test_parse_llm_response_valid_json() -> None:
    result = parse_llm_response(VALID_RESPONSE)
    assert result["title"] == "Login fails"
    assert result["severity"] == "high"


def test_parse_llm_response_rejects_markdown() -> None:
    response = f"```json\n{VALID_RESPONSE}\n```"
    with pytest.raises(AnalysisError, match="Failed to parse"):
        parse_llm_response(response)


def test_parse_llm_response_rejects_trailing_prose() -> None:
    with pytest.raises(AnalysisError, match="Failed to parse"):
        parse_llm_response(VALID_RESPONSE + "\nLet me know if you need anything else.")


def test_parse_llm_response_invalid() -> None:
    with pytest.raises(AnalysisError, match="Failed to parse"):
        parse_llm_response("This is not JSON")


def test_parse_llm_response_not_an_object() -> None:
    with pytest.raises(AnalysisError, match="not a JSON object"):
        parse_llm_response('["Login fails"]')


def test_parse_llm_response_missing_fields() -> None:
    with pytest.raises(AnalysisError, match="Missing required field"):
        parse_llm_response(json.dumps({"title": "Only title"}))


def test_llm_service_requires_key() -> None:
    with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
        LLMService(provider="anthropic")


def test_llm_service_rejects_unknown_provider() -> None:
    with pytest.raises(ValueError, match="Unknown LLM provider"):
        LLMService(provider="gemini", anthropic_api_key="k", openai_api_key="k")


@pytest.mark.asyncio
async def test_analyze_with_anthropic_returns_equal_record() -> None:
    with patch("reporter.services.llm.AsyncAnthropic") as mock_anthropic:
        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(return_value=_anthropic_response(VALID_RESPONSE))
        mock_anthropic.return_value = mock_client
        service = LLMService(provider="anthropic", anthropic_api_key="test-key")
        result = await service.analyze(MESSAGES)

    assert result == BugAnalysis(
        title="Login fails",
        description="...",
        severity="high",
        steps_to_reproduce=["Open app", "Tap login"],
    )
    prompt = mock_client.messages.create.call_args[1]["messages"][0]["content"]
    assert "[user]: I can't log in" in prompt
    assert "state:resolved" not in prompt


@pytest.mark.asyncio
async def test_analyze_non_text_block_fails() -> None:
    with patch("reporter.services.llm.AsyncAnthropic") as mock_anthropic:
        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(
            return_value=_anthropic_response("", block_type="tool_use")
        )
        mock_anthropic.return_value = mock_client
        service = LLMService(provider="anthropic", anthropic_api_key="test-key")
        with pytest.raises(AnalysisError, match="Unexpected response type"):
            await service.analyze(MESSAGES)


@pytest.mark.asyncio
async def test_analyze_fenced_output_fails_without_retry() -> None:
    with patch("reporter.services.llm.AsyncAnthropic") as mock_anthropic:
        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(
            return_value=_anthropic_response(f"```json\n{VALID_RESPONSE}\n```")
        )
        mock_anthropic.return_value = mock_client
        service = LLMService(provider="anthropic", anthropic_api_key="test-key")
        with pytest.raises(AnalysisError):
            await service.analyze(MESSAGES)
        assert mock_client.messages.create.await_count == 1


@pytest.mark.asyncio
async def test_analyze_api_error_becomes_analysis_error() -> None:
    with patch("reporter.services.llm.AsyncAnthropic") as mock_anthropic:
        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(side_effect=Exception("overloaded"))
        mock_anthropic.return_value = mock_client
        service = LLMService(provider="anthropic", anthropic_api_key="test-key")
        with pytest.raises(AnalysisError, match="anthropic request failed: overloaded"):
            await service.analyze(MESSAGES)


@pytest.mark.asyncio
async def test_analyze_with_openai() -> None:
    mock_response = MagicMock()
    mock_response.choices = [MagicMock()]
    mock_response.choices[0].message.content = VALID_RESPONSE
    with patch("reporter.services.llm.AsyncOpenAI") as mock_openai:
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(return_value=mock_response)
        mock_openai.return_value = mock_client
        service = LLMService(provider="openai", openai_api_key="test-key")
        result = await service.analyze(MESSAGES)
        assert result.title == "Login fails"


@pytest.mark.asyncio
async def test_analyze_openai_empty_content_fails() -> None:
    mock_response = MagicMock()
    mock_response.choices = [MagicMock()]
    mock_response.choices[0].message.content = None
    with patch("reporter.services.llm.AsyncOpenAI") as mock_openai:
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(return_value=mock_response)
        mock_openai.return_value = mock_client
        service = LLMService(provider="openai", openai_api_key="test-key")
        with pytest.raises(AnalysisError, match="empty response"):
            await service.analyze(MESSAGES)


def test_llm_clients_do_not_retry() -> None:
    """The model is called at most once per analysis."""
    anthropic_service = LLMService(provider="anthropic", anthropic_api_key="test-key")
    openai_service = LLMService(provider="openai", openai_api_key="test-key")
    assert anthropic_service._anthropic_client is not None
    assert openai_service._openai_client is not None
    assert anthropic_service._anthropic_client.max_retries == 0
    assert openai_service._openai_client.max_retries == 0
