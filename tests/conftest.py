import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.routers.chat import get_coach
from app.services.agent import NutriPlanCoach
from app.services.conversation_store import ConversationStore
from tests.helpers import ScriptedChatModel


@pytest.fixture
def store():
    return ConversationStore(max_history=0)


@pytest.fixture
def make_coach(store):
    def _make(*responses, delay=0.0):
        llm = ScriptedChatModel(responses, delay=delay)
        return NutriPlanCoach(llm=llm, store=store), llm
    return _make


@pytest.fixture
def make_client(make_coach):
    """TestClient whose coach replays the given replies."""
    clients = []

    def _make(*responses):
        nutri, llm = make_coach(*responses)
        app.dependency_overrides[get_coach] = lambda: nutri
        client = TestClient(app)
        clients.append(client)
        return client, llm

    yield _make
    app.dependency_overrides.clear()
    for client in clients:
        client.close()
