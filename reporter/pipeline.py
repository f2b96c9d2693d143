# reporter/pipeline.py
"""Conversation to GitHub issue pipeline."""

import asyncio
import logging
from enum import Enum

from reporter.exceptions import EmptyConversationError, ReporterError, ValidationError
from reporter.models.bug_report import Issue
from reporter.models.conversation import ConversationMeta, Message
from reporter.models.request import PipelineRequest
from reporter.services.context import build_user_context
from reporter.services.crisp_client import CrispAPIError, CrispClient, conversation_url
from reporter.services.github_client import GitHubClient, parse_repository
from reporter.services.llm import LLMService
from reporter.services.notifier import Notifier

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    """Pipeline states, logged as each one is reached."""

    RECEIVED = "received"
    FETCHED = "fetched"
    ANALYZED = "analyzed"
    FILED = "filed"
    RESPONDED = "responded"


class BugPipeline:
    """Fetches a conversation, analyzes it, files an issue and notes it in Crisp."""

    def __init__(
        self,
        crisp: CrispClient,
        llm: LLMService,
        github: GitHubClient,
        notifier: Notifier,
        default_repo: str = "",
    ) -> None:
        self.crisp = crisp
        self.llm = llm
        self.github = github
        self.notifier = notifier
        self.default_repo = default_repo

    async def resolve_repository(self, request: PipelineRequest) -> str:
        """
        Pick the target repository: request, then workspace settings, then default.

        Raises:
            ValidationError: If no repository is configured anywhere
            InvalidRepositoryError: If the chosen repository is malformed
        """
        repo = request.github_repo
        if not repo:
            try:
                settings = await self.crisp.get_settings(request.website_id)
            except CrispAPIError as e:
                logger.warning(f"Could not read settings for website {request.website_id}: {e}")
                settings = {}
            stored = settings.get("github_repo")
            repo = stored.strip() if isinstance(stored, str) else ""
        if not repo:
            repo = self.default_repo
        if not repo:
            raise ValidationError("GitHub repository not configured")

        parse_repository(repo)
        return repo

    async def run(self, request: PipelineRequest) -> Issue:
        """Fetch the conversation from Crisp, then process it."""
        logger.info(f"[{request.session_id}] {Stage.RECEIVED.value}")
        repo = await self.resolve_repository(request)
        conversation = await self.crisp.fetch_conversation(request.website_id, request.session_id)
        logger.info(f"[{request.session_id}] {Stage.FETCHED.value}")
        return await self.process(request, conversation.messages, conversation.meta, repo)

    async def run_with_messages(
        self, request: PipelineRequest, messages: list[Message], meta: ConversationMeta
    ) -> Issue:
        """Process a conversation supplied by the caller."""
        logger.info(f"[{request.session_id}] {Stage.RECEIVED.value} (embedded)")
        repo = await self.resolve_repository(request)
        logger.info(f"[{request.session_id}] {Stage.FETCHED.value} ({len(messages)} messages)")
        return await self.process(request, messages, meta, repo)

    async def process(
        self,
        request: PipelineRequest,
        messages: list[Message],
        meta: ConversationMeta,
        repo: str,
    ) -> Issue:
        """
        Analyze messages, file the issue and schedule the confirmation note.

        Stages run strictly in order and the first failure is final. The
        note is not awaited; its failure never changes the result.

        Args:
            request: Identifies the conversation
            messages: Conversation transcript
            meta: Conversation metadata
            repo: Target repository in "owner/repo" format

        Returns:
            The created Issue

        Raises:
            ReporterError: With the stage that failed logged
        """
        session_id = request.session_id
        stage = Stage.FETCHED
        try:
            if not messages:
                raise EmptyConversationError("No messages found in conversation")

            context = build_user_context(meta)
            analysis = await self.llm.analyze(messages)
            stage = Stage.ANALYZED
            logger.info(f"[{session_id}] {stage.value}")

            url = conversation_url(request.website_id, session_id)
            issue = await asyncio.to_thread(self.github.file_issue, analysis, context, url, repo)
            stage = Stage.FILED
            logger.info(f"[{session_id}] {stage.value}: #{issue.number} in {repo}")
        except ReporterError as e:
            logger.error(f"[{session_id}] failed after {stage.value}: {e}")
            raise

        self.notifier.schedule(request.website_id, session_id, issue.url, issue.title)
        return issue
