import pytest
from unittest.mock import AsyncMock, MagicMock

from tripcopilot.agents.copilot_agent import build_copilot_agent
from tripcopilot.interfaces.ai_repository import InMemoryAIRepository
from tripcopilot.schemas.ai_schemas import ChatMessage, ModelResult

DEFAULT_MODEL = "gpt-5-mini"


@pytest.fixture
def make_messages():
    """Build user turns from plain strings"""
    def _make(*contents, role="user"):
        return [ChatMessage(role=role, content=c) for c in contents]
    return _make


@pytest.fixture
def repository():
    return InMemoryAIRepository()


@pytest.fixture
def bridge():
    fake = MagicMock()
    fake.post_json = AsyncMock(return_value={"status": "on_time"})
    return fake


@pytest.fixture
def model():
    """Model collaborator that answers with fixed text and usage"""
    fake = MagicMock()
    fake.respond = AsyncMock(return_value=ModelResult(
        text="Here is a practical plan.",
        token_usage={"input_tokens": 120, "output_tokens": 40},
    ))
    return fake


@pytest.fixture
def agent(repository, model, bridge):
    return build_copilot_agent(repository, model, bridge, DEFAULT_MODEL)
