from datetime import datetime
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from dotenv import load_dotenv

# Load the test environment FIRST, before any app imports, so that Settings()
# sees ENVIRONMENT=test (no TrustedHost, no rate limiting, no oracle key).
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env.test")

from buddy.main import app  # noqa: E402
from buddy.models.flow import TaskContext, TaskSummary  # noqa: E402
from buddy.models.intent import ParsedIntent  # noqa: E402
from buddy.routes import assistant  # noqa: E402
from buddy.services.ai_service import AIService  # noqa: E402
from buddy.services.checkin_service import CheckinService  # noqa: E402
from buddy.services.string_service import StringService  # noqa: E402
from buddy.services.tool_router import ToolRouter  # noqa: E402
from buddy.workflows.engine import FlowEngine  # noqa: E402


class FakeExtractor:
    """Stands in for ExtractionService: returns preset fields, records calls."""

    def __init__(self, fault=None, **fields):
        self.fields = fields
        self.fault = fault
        self.calls = []

    async def extract(self, schema, context_text, free_text):
        self.calls.append(free_text)
        return ParsedIntent(fields={name: self.fields.get(name) for name in schema}, fault=self.fault)


def chat_reply(content=None, tool_calls=None):
    """Shape of an OpenAI chat-completion message."""
    return SimpleNamespace(content=content, tool_calls=tool_calls)


def tool_call(name, arguments):
    return SimpleNamespace(function=SimpleNamespace(name=name, arguments=arguments))


@pytest.fixture
def now():
    # Tuesday afternoon on the caller's clock
    return datetime(2026, 3, 10, 14, 0)


@pytest.fixture
def empty_context():
    return TaskContext(total=0, completed=0, pending=0)


@pytest.fixture
def task_context():
    return TaskContext(
        total=3,
        completed=1,
        pending=2,
        pending_tasks=[
            TaskSummary(id=1, title="Write report", time_of_day="afternoon"),
            TaskSummary(id=2, title="Gym", time_of_day="morning", start_time="06:00"),
        ],
        completed_tasks=[TaskSummary(id=3, title="Yoga", time_of_day="morning", completed=True)],
    )


@pytest.fixture
def fake_ai():
    ai = MagicMock(spec=AIService)
    ai.available = True
    ai.complete = AsyncMock(return_value=chat_reply(content="ok"))
    ai.generate_text = AsyncMock(return_value="1. Gym\n2. Write report\nYou got this!")
    return ai


@pytest.fixture
def make_engine(fake_ai):
    """Builds a FlowEngine around a FakeExtractor and the fake oracle."""
    def _make(extractor=None, ai=None):
        return FlowEngine(extractor=extractor or FakeExtractor(), ai=ai or fake_ai, strings=StringService())
    return _make


@pytest.fixture(scope="function")
def test_client(make_engine, fake_ai):
    """
    Provides a TestClient for API integration tests with the oracle replaced
    by fakes, so no test ever reaches the network.
    """
    app.dependency_overrides[assistant.get_flow_engine] = lambda: make_engine()
    app.dependency_overrides[assistant.get_tool_router] = lambda: ToolRouter(ai=fake_ai, strings=StringService())
    app.dependency_overrides[assistant.get_checkin_service] = lambda: CheckinService(ai=fake_ai)

    # The app's lifespan (startup/shutdown events) is managed by the TestClient
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
