"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path
from types import SimpleNamespace
import fakeredis
import pytest

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from config import Settings
from database import Store
from llm import ChatProxy
from uploads import UploadService
from products import ProductService
from auth import AuthService
from interface.web_app import create_app


TEST_SECRET = "test-secret-key-for-signing-tokens-0123456789"


class StubChatClient:
    """Stands in for the OpenAI client; records requests and returns a canned answer."""

    def __init__(self, answer="Our shoes ship in 3 days.", error=None):
        self.answer = answer
        self.error = error
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.answer)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def settings(tmp_path):
    """Settings pointing uploads at a temporary directory."""
    return Settings(
        jwt_secret_key=TEST_SECRET,
        upload_dir=tmp_path / "uploads",
        openai_model="gpt-4",
    )


@pytest.fixture
def store():
    """Store backed by an in-memory fake Redis."""
    return Store(fakeredis.FakeRedis(decode_responses=True))


@pytest.fixture
def uploads(settings):
    return UploadService(settings.upload_dir)


@pytest.fixture
def product_service(store, uploads, settings):
    return ProductService(store, uploads, default_image=settings.default_image)


@pytest.fixture
def auth_service(store):
    return AuthService(store)


@pytest.fixture
def chat_client():
    return StubChatClient()


@pytest.fixture
def app(settings, store, chat_client):
    app = create_app(settings, store=store, chat=ChatProxy(None, settings.openai_model, client=chat_client))
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def signup_payload():
    return {
        "email": "a@example.com",
        "password": "secret1",
        "firstName": "A",
        "lastName": "B",
    }


@pytest.fixture
def auth_header(client, signup_payload):
    """Authorization header for a freshly signed-up user."""
    response = client.post('/users/signup', json=signup_payload)
    return {'Authorization': f"Bearer {response.get_json()['token']}"}


@pytest.fixture
def make_chat_client():
    """Factory for stub chat clients with a chosen answer or error."""
    return StubChatClient
