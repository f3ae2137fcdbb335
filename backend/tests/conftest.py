from __future__ import annotations

from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

from appia.core.config import Settings
from appia.main import create_app
from appia.services.anthropic_client import Completion
from appia.services.database import create_db_engine, init_db

ARTIFACT_RESPONSE = """Here is your todo app.

<appiaArtifact id="todo" title="Todo App">
<appiaAction type="file" filePath="package.json">{"name": "todo"}</appiaAction>
<appiaAction type="file" filePath="src/App.jsx">export default function App() { return null; }</appiaAction>
<appiaAction type="shell">npm install</appiaAction>
</appiaArtifact>
"""


class FakeLLMClient:
    """Stands in for AnthropicClient; answers every call with ``text``."""

    def __init__(self, text: str = ARTIFACT_RESPONSE, input_tokens: int = 10, output_tokens: int = 5):
        self.text = text
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens
        self.calls: List[Dict[str, Any]] = []

    def complete(self, system, messages, model, max_tokens) -> Completion:
        self.calls.append({"system": system, "messages": messages, "model": model, "max_tokens": max_tokens})
        return Completion(
            text=self.text,
            model=model,
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
        )


def make_settings(**overrides) -> Settings:
    values = {
        "app_env": "test",
        "database_url": "sqlite://",
        "anthropic_api_key": "",
        "rate_limit_per_min": 0,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def llm():
    return FakeLLMClient()


@pytest.fixture
def make_client(engine, llm):
    """Build a TestClient for an app with the given setting overrides."""

    def _make(**overrides) -> TestClient:
        app = create_app(settings=make_settings(**overrides), engine=engine, llm_client=llm)
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client):
    return make_client()
