"""Pytest configuration and shared fixtures."""
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from app.main import app, get_model_factory
from config.settings import Settings, get_settings


class FakeModel:
    """Stands in for Gemini; records every prompt it receives."""

    def __init__(self, reply: str = "Median rents rose 3.1% year over year.", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_model():
    return FakeModel()


@pytest.fixture
def configured_settings():
    return Settings(gemini_api_key="test-key", gemini_model="gemini-test", relay_base_url=None)


@pytest.fixture
def factory_calls():
    return []


@pytest.fixture
def client(configured_settings, fake_model, factory_calls):
    """Test client with settings and the model factory overridden."""

    def factory(settings):
        factory_calls.append(settings)
        return fake_model

    app.dependency_overrides[get_settings] = lambda: configured_settings
    app.dependency_overrides[get_model_factory] = lambda: factory

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
