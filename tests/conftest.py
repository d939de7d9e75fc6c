"""Shared fixtures for the greeter test suite.

The provider client and the upstream realtime socket are replaced by the
fakes in `tests.fakes` so the suite runs without network access.
"""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.realtime.session_store import SessionStore
from tests.fakes import FakeConnector, FakeOpenAI, make_image_b64
from utils.database_init import AsyncDatabaseInitializer
from utils.settings import GreeterSettings


@pytest.fixture
def settings(tmp_path):
    return GreeterSettings(
        openai_api_key="sk-test",
        database_dir=tmp_path,
        inject_interval=0.05,
        compliment_ttl=60,
    )


@pytest.fixture
def store(tmp_path):
    return SessionStore(AsyncDatabaseInitializer(tmp_path))


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def connector():
    return FakeConnector()


@pytest.fixture
def client(settings, fake_openai, store, connector):
    app = create_app(settings, openai_client=fake_openai, session_store=store, upstream_connector=connector)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def image_b64():
    return make_image_b64()
