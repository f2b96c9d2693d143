# reporter/services/notifier.py
"""Posts issue confirmations back into the Crisp conversation."""

import asyncio
import logging

from reporter.exceptions import NotificationError
from reporter.services.crisp_client import CrispClient

logger = logging.getLogger(__name__)


def format_note(issue_url: str, issue_title: str) -> str:
    return f"🐛 Bug filed on GitHub: {issue_url}\nTitle: {issue_title}"


class Notifier:
    """Best-effort confirmation notes, run in the background."""

    def __init__(self, crisp: CrispClient) -> None:
        self._crisp = crisp
        self._tasks: set[asyncio.Task[None]] = set()

    async def notify(
        self, website_id: str, session_id: str, issue_url: str, issue_title: str
    ) -> None:
        """
        Post a confirmation note into the conversation.

        Raises:
            NotificationError: If the note could not be posted
        """
        try:
            await self._crisp.post_note(website_id, session_id, format_note(issue_url, issue_title))
        except Exception as e:
            raise NotificationError(f"Failed to add Crisp note: {e}") from e
        logger.info(f"Posted issue note to session {session_id}")

    def schedule(
        self, website_id: str, session_id: str, issue_url: str, issue_title: str
    ) -> asyncio.Task[None]:
        """Start notify() as a detached task whose failure is only logged."""
        task = asyncio.create_task(
            self.notify(website_id, session_id, issue_url, issue_title)
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"{error}", exc_info=error)

    async def drain(self) -> None:
        """Wait for pending notes to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
