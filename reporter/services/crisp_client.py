# reporter/services/crisp_client.py
"""Crisp REST API client for conversations, notes and plugin settings."""

import asyncio
import logging
from typing import Any

import aiohttp

from reporter.exceptions import UpstreamFetchError
from reporter.models.conversation import Conversation, ConversationMeta, Message

logger = logging.getLogger(__name__)

CRISP_API_URL = "https://api.crisp.chat/v1"
CRISP_INBOX_URL = "https://app.crisp.chat/website/{website_id}/inbox/{session_id}"


class CrispAPIError(Exception):
    """Error from the Crisp API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def conversation_url(website_id: str, session_id: str) -> str:
    """Link to the conversation in the Crisp inbox."""
    return CRISP_INBOX_URL.format(website_id=website_id, session_id=session_id)


class CrispClient:
    """Crisp client authenticated with a plugin token."""

    def __init__(
        self,
        identifier: str,
        key: str,
        plugin_id: str = "",
        base_url: str = CRISP_API_URL,
        timeout: float = 30.0,
    ) -> None:
        """
        Initialize the client. The HTTP session is opened on first use.

        Args:
            identifier: Plugin token identifier
            key: Plugin token key
            plugin_id: Plugin ID, used for subscription settings
            base_url: Crisp REST API root
            timeout: Seconds to wait for each request
        """
        self.plugin_id = plugin_id
        self._base_url = base_url.rstrip("/")
        self._auth = aiohttp.BasicAuth(identifier, key)
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                auth=self._auth,
                timeout=self._timeout,
                headers={"X-Crisp-Tier": "plugin"},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _request(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> Any:
        """
        Call the Crisp API and return the "data" member of the reply.

        Raises:
            CrispAPIError: On transport errors, timeouts and error replies
        """
        url = f"{self._base_url}{path}"
        try:
            async with self._get_session().request(method, url, json=payload) as response:
                try:
                    body = await response.json(content_type=None)
                except ValueError:
                    body = None
                if response.status >= 400 or (isinstance(body, dict) and body.get("error")):
                    reason = body.get("reason") if isinstance(body, dict) else None
                    raise CrispAPIError(
                        f"Crisp API error ({response.status}): {reason or response.reason}",
                        status_code=response.status,
                    )
        except aiohttp.ClientError as e:
            raise CrispAPIError(f"Crisp request failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise CrispAPIError(f"Crisp request timed out: {method} {path}") from e

        return body.get("data") if isinstance(body, dict) else None

    async def get_messages(self, website_id: str, session_id: str) -> list[Message]:
        """Fetch the messages of a conversation, oldest first."""
        data = await self._request(
            "GET", f"/website/{website_id}/conversation/{session_id}/messages"
        )
        if not isinstance(data, list):
            return []
        return [Message.from_dict(item) for item in data if isinstance(item, dict)]

    async def get_conversation_meta(self, website_id: str, session_id: str) -> ConversationMeta:
        """Fetch visitor metadata (email, device) of a conversation."""
        data = await self._request(
            "GET", f"/website/{website_id}/conversation/{session_id}/meta"
        )
        return ConversationMeta.from_dict(data)

    async def post_note(self, website_id: str, session_id: str, text: str) -> None:
        """Post an operator-only note into a conversation."""
        await self._request(
            "POST",
            f"/website/{website_id}/conversation/{session_id}/message",
            {"type": "note", "from": "operator", "origin": "chat", "content": text},
        )

    async def fetch_conversation(self, website_id: str, session_id: str) -> Conversation:
        """
        Fetch messages and metadata for a conversation.

        Metadata is best effort: if it cannot be fetched, an empty
        ConversationMeta is returned alongside the messages.

        Args:
            website_id: Crisp website (workspace) ID
            session_id: Crisp session (conversation) ID

        Returns:
            Conversation with messages and metadata

        Raises:
            UpstreamFetchError: If the messages cannot be fetched
        """
        try:
            messages = await self.get_messages(website_id, session_id)
        except CrispAPIError as e:
            raise UpstreamFetchError(f"Failed to fetch conversation messages: {e}") from e

        try:
            meta = await self.get_conversation_meta(website_id, session_id)
        except CrispAPIError as e:
            logger.warning(f"Could not fetch metadata for session {session_id}: {e}")
            meta = ConversationMeta()

        logger.info(f"Fetched {len(messages)} messages for session {session_id}")
        return Conversation(messages=messages, meta=meta)

    async def get_settings(self, website_id: str) -> dict[str, Any]:
        """Read the plugin subscription settings of a website."""
        data = await self._request(
            "GET", f"/plugin/{self.plugin_id}/subscription/{website_id}/settings"
        )
        if not isinstance(data, dict):
            return {}
        settings = data.get("settings")
        return settings if isinstance(settings, dict) else {}

    async def save_settings(self, website_id: str, settings: dict[str, Any]) -> None:
        """Update the plugin subscription settings of a website."""
        await self._request(
            "PATCH", f"/plugin/{self.plugin_id}/subscription/{website_id}/settings",
            {"settings": settings},
        )
