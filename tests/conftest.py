# tests/conftest.py
import json
from pathlib import Path
from typing import Any, cast
from unittest.mock import AsyncMock, MagicMock

import pytest

from reporter.models.bug_report import BugAnalysis
from reporter.models.conversation import Conversation, ConversationMeta, Message

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_conversations() -> dict[str, Any]:
    """Load sample conversations from JSON fixture."""
    with open(FIXTURES / "sample_conversations.json") as f:
        return cast(dict[str, Any], json.load(f))


@pytest.fixture
def sample_analysis() -> BugAnalysis:
    return BugAnalysis(
        title="Login fails",
        description="Users cannot log in after the latest release.",
        severity="high",
        steps_to_reproduce=["Open app", "Tap login"],
    )


@pytest.fixture
def mock_crisp() -> MagicMock:
    """Crisp client returning one text message and empty metadata."""
    crisp = MagicMock()
    crisp.fetch_conversation = AsyncMock(return_value=Conversation(
        messages=[Message(type="text", from_="user", content="Login is broken", timestamp=1)],
        meta=ConversationMeta(),
    ))
    crisp.get_settings = AsyncMock(return_value={})
    crisp.save_settings = AsyncMock(return_value=None)
    crisp.post_note = AsyncMock(return_value=None)
    crisp.close = AsyncMock(return_value=None)
    return crisp


@pytest.fixture
def mock_llm(sample_analysis: BugAnalysis) -> MagicMock:
    llm = MagicMock()
    llm.analyze = AsyncMock(return_value=sample_analysis)
    return llm


@pytest.fixture
def mock_issue() -> MagicMock:
    issue = MagicMock()
    issue.number = 42
    issue.html_url = "https://github.com/acme/app/issues/42"
    return issue
