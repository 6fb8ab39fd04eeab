"""
Pytest configuration and fixtures
"""
import os

# Keep test runs off the filesystem and away from real credentials
os.environ["LOG_TO_FILE"] = "false"
os.environ.pop("GEMINI_API_KEY", None)

import pytest
from langchain_core.messages import AIMessage

from llm_client import GeminiClient, get_client


class FakeChatModel:
    """Stands in for ChatGoogleGenerativeAI; records every payload it receives."""

    def __init__(self, owner, options):
        self.owner = owner
        self.options = options

    async def ainvoke(self, messages):
        self.owner.calls.append({"messages": messages, **self.options})
        if self.owner.error is not None:
            raise self.owner.error
        return AIMessage(content=self.owner.reply)


class FakeGeminiClient(GeminiClient):
    """GeminiClient whose network boundary is replaced by FakeChatModel."""

    def __init__(self, reply="", error=None):
        super().__init__(api_key="test-key")
        self.reply = reply
        self.error = error
        self.calls = []

    def _chat_model(self, model, thinking_budget=None, response_mime_type=None, response_schema=None):
        return FakeChatModel(self, {
            "model": model,
            "thinking_budget": thinking_budget,
            "response_mime_type": response_mime_type,
            "response_schema": response_schema,
        })


@pytest.fixture
def fake_client():
    """Factory for fake clients: fake_client(reply=..., error=...)."""
    return FakeGeminiClient


@pytest.fixture(autouse=True)
def clear_client_cache():
    get_client.cache_clear()
    yield
    get_client.cache_clear()
