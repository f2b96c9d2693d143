# reporter/services/llm.py
"""LLM service that turns a conversation into a BugAnalysis."""

import json
import logging
from typing import Any

from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from config.prompts import format_analysis_prompt
from reporter.exceptions import AnalysisError
from reporter.models.bug_report import BugAnalysis
from reporter.models.conversation import Message

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ["title", "description", "severity"]


def parse_llm_response(response: str) -> dict[str, Any]:
    """
    Parse the model output as a single JSON object.

    Parsing is strict: code fences or surrounding prose are rejected.

    Args:
        response: Raw LLM response text

    Returns:
        Parsed JSON as a dictionary

    Raises:
        AnalysisError: If response cannot be parsed or is missing required fields
    """
    try:
        result = json.loads(response)
    except json.JSONDecodeError as e:
        raise AnalysisError(f"Failed to parse model response as JSON: {e}") from e

    if not isinstance(result, dict):
        raise AnalysisError("Model response is not a JSON object")

    for field in REQUIRED_FIELDS:
        if field not in result:
            raise AnalysisError(f"Missing required field: {field}")

    return result


class LLMService:
    """Bug analysis backed by Anthropic or OpenAI."""

    def __init__(
        self,
        provider: str = "anthropic",
        anthropic_api_key: str | None = None,
        openai_api_key: str | None = None,
        anthropic_model: str = "claude-sonnet-4-20250514",
        openai_model: str = "gpt-4o",
        timeout: float = 60.0,
    ) -> None:
        """
        Initialize LLM service with the client for the chosen provider.

        Args:
            provider: "anthropic" or "openai"
            anthropic_api_key: Anthropic API key
            openai_api_key: OpenAI API key
            anthropic_model: Model used with Anthropic
            openai_model: Model used with OpenAI
            timeout: Seconds to wait for the model before giving up

        Raises:
            ValueError: If the provider is unknown or its key is missing
        """
        self.provider = provider
        self.anthropic_model = anthropic_model
        self.openai_model = openai_model

        self._anthropic_client: AsyncAnthropic | None = None
        self._openai_client: AsyncOpenAI | None = None

        if provider == "anthropic":
            if not anthropic_api_key:
                raise ValueError("ANTHROPIC_API_KEY is required for the anthropic provider")
            self._anthropic_client = AsyncAnthropic(
                api_key=anthropic_api_key, timeout=timeout, max_retries=0
            )
        elif provider == "openai":
            if not openai_api_key:
                raise ValueError("OPENAI_API_KEY is required for the openai provider")
            self._openai_client = AsyncOpenAI(
                api_key=openai_api_key, timeout=timeout, max_retries=0
            )
        else:
            raise ValueError(f"Unknown LLM provider: {provider}")

    async def _call_anthropic(self, prompt: str) -> str:
        """Send the prompt to Anthropic and return the text of the reply."""
        if not self._anthropic_client:
            raise RuntimeError("Anthropic client not configured")

        response = await self._anthropic_client.messages.create(
            model=self.anthropic_model,
            max_tokens=1024,
            messages=[{"role": "user", "content": prompt}],
        )

        if not response.content:
            raise AnalysisError("Anthropic returned empty response")
        content_block = response.content[0]
        if getattr(content_block, "type", None) != "text":
            raise AnalysisError("Unexpected response type from Anthropic")
        return str(content_block.text)

    async def _call_openai(self, prompt: str) -> str:
        """Send the prompt to OpenAI and return the text of the reply."""
        if not self._openai_client:
            raise RuntimeError("OpenAI client not configured")

        response = await self._openai_client.chat.completions.create(
            model=self.openai_model,
            messages=[{"role": "user", "content": prompt}],
            temperature=0.1,
        )

        content = response.choices[0].message.content
        if content is None:
            raise AnalysisError("OpenAI returned empty response")
        return content

    async def complete(self, prompt: str) -> str:
        """
        Send a prompt to the configured provider.

        Raises:
            AnalysisError: If the request fails or the reply is not text
        """
        try:
            if self.provider == "anthropic":
                return await self._call_anthropic(prompt)
            return await self._call_openai(prompt)
        except AnalysisError:
            raise
        except Exception as e:
            raise AnalysisError(f"{self.provider} request failed: {e}") from e

    async def analyze(self, messages: list[Message]) -> BugAnalysis:
        """
        Extract a bug report from conversation messages.

        Called once per pipeline run; malformed output is not retried.

        Args:
            messages: Conversation messages, any type

        Returns:
            Validated BugAnalysis

        Raises:
            AnalysisError: If the model call fails or its output is invalid
        """
        prompt = format_analysis_prompt(messages)
        logger.info(f"Requesting bug analysis from {self.provider}")
        response = await self.complete(prompt)
        analysis = BugAnalysis.from_llm_output(parse_llm_response(response))
        logger.info(f"Analysis complete: {analysis.title!r} ({analysis.severity})")
        return analysis
