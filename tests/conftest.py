import httpx
import pytest
from fastapi.testclient import TestClient

from wordbook.api.deps import get_dictionary, get_llm_provider, get_word_store
from wordbook.core.llm_provider import DummyLLMProvider
from wordbook.core.word_store import InMemoryWordStore
from wordbook.frontend.client import ApiClient, get_api_client
from wordbook.main import create_app

SERENDIPITY = "the occurrence of events by chance in a happy way"


class FakeDictionary:
    """Stands in for DictionaryClient; unknown words have no definition."""

    def __init__(self, definitions=None):
        self.definitions = dict(definitions or {})
        self.calls = []

    async def fetch_meaning(self, word):
        self.calls.append(word)
        return self.definitions.get(word)


@pytest.fixture
def store():
    return InMemoryWordStore()


@pytest.fixture
def dictionary():
    return FakeDictionary({"serendipity": SERENDIPITY})


@pytest.fixture
def provider():
    return DummyLLMProvider("Petrichor|the pleasant smell of earth after rain")


@pytest.fixture
def app(store, dictionary, provider):
    app = create_app()
    app.dependency_overrides[get_word_store] = lambda: store
    app.dependency_overrides[get_dictionary] = lambda: dictionary
    app.dependency_overrides[get_llm_provider] = lambda: provider

    # the web pages call the JSON API of this same app in-process
    async def api_client():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://api") as client:
            yield ApiClient(client)

    app.dependency_overrides[get_api_client] = api_client
    return app


@pytest.fixture
def client(app):
    return TestClient(app)
