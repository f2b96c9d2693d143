from reporter.services.context import build_user_context
from reporter.services.crisp_client import CrispAPIError, CrispClient, conversation_url
from reporter.services.github_client import GitHubClient, parse_repository
from reporter.services.llm import LLMService, parse_llm_response
from reporter.services.notifier import Notifier

__all__ = [
    "build_user_context",
    "conversation_url",
    "CrispAPIError",
    "CrispClient",
    "GitHubClient",
    "LLMService",
    "Notifier",
    "parse_llm_response",
    "parse_repository",
]
